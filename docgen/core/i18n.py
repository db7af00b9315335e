"""French/Arabic strings shared by the exporter, the form engine and the UI."""

from datetime import date

TRANSLATIONS: dict[str, dict[str, str]] = {
    "fr": {
        "republic": "République Algérienne Démocratique et Populaire",
        "generated_electronically": "Document généré électroniquement",
        "date_prefix": "Date : ",
        "field_required": "Ce champ est obligatoire",
        "min_length": "Minimum {min} caractères",
        "max_length": "Maximum {max} caractères",
        "invalid_format": "Format invalide",
        "invalid_option": "Option invalide",
        "invalid_email": "Adresse e-mail invalide",
        "invalid_date": "Date invalide (AAAA-MM-JJ)",
        "save": "Enregistrer",
        "generate": "Générer le PDF",
        "preview": "Aperçu",
        "login_required": "Connectez-vous pour enregistrer vos formulaires",
        "export_success": "PDF généré avec succès",
        "export_failed": "Échec de la génération du PDF",
        "save_success": "Formulaire enregistré",
        "save_failed": "Échec de l'enregistrement",
        "store_error": "Une erreur est survenue, veuillez réessayer",
    },
    "ar": {
        "republic": "الجمهورية الجزائرية الديمقراطية الشعبية",
        "generated_electronically": "تم إنشاء هذه الوثيقة إلكترونياً",
        "date_prefix": "التاريخ: ",
        "field_required": "هذا الحقل مطلوب",
        "min_length": "الحد الأدنى {min} أحرف",
        "max_length": "الحد الأقصى {max} أحرف",
        "invalid_format": "صيغة غير صالحة",
        "invalid_option": "خيار غير صالح",
        "invalid_email": "بريد إلكتروني غير صالح",
        "invalid_date": "تاريخ غير صالح (YYYY-MM-DD)",
        "save": "حفظ",
        "generate": "إنشاء PDF",
        "preview": "معاينة",
        "login_required": "يرجى تسجيل الدخول لحفظ النماذج",
        "export_success": "تم إنشاء ملف PDF بنجاح",
        "export_failed": "فشل إنشاء ملف PDF",
        "save_success": "تم حفظ النموذج",
        "save_failed": "فشل الحفظ",
        "store_error": "حدث خطأ، يرجى المحاولة مرة أخرى",
    },
}


def t(key: str, language: str = "fr", **kwargs: object) -> str:
    """Translate a key, falling back to French, then to the key itself."""
    table = TRANSLATIONS.get(language, TRANSLATIONS["fr"])
    text = table.get(key) or TRANSLATIONS["fr"].get(key, key)
    return text.format(**kwargs) if kwargs else text


def format_date(value: date) -> str:
    """Render a date as dd/mm/yyyy, the fr-FR and ar-DZ short form."""
    return value.strftime("%d/%m/%Y")


def pick(language: str, french: str | None, arabic: str | None) -> str:
    """Choose the Arabic variant for 'ar' when it is set, otherwise French."""
    if language == "ar" and arabic:
        return arabic
    return french or arabic or ""
