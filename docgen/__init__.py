"""Bilingual administrative document generator."""

__version__ = "0.1.0"
