"""Streamlit pages of the document generator."""
