"""Streamlit frontend for the document generator.

Users pick a category and a template, fill the generated form, and either
save the values or export a PDF. Validation runs locally with the same
form engine the API uses, so invalid submissions never leave the browser.
"""

import logging
import os
from datetime import date
from typing import Any

import streamlit as st
from jose import JWTError, jwt

from docgen.core.context import Identity, SessionContext
from docgen.core.i18n import pick, t
from docgen.interfaces.form import ControlSpec, FormValidationError
from docgen.strategies.forms import FormEngine
from docgen.strategies.template_engine import FieldDescriptor, FieldRenderer
from frontend.api_client import APIClient, APIError

# Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

# Page config
st.set_page_config(
    page_title="Documents administratifs",
    page_icon="📄",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# Session
# =============================================================================


def get_context() -> SessionContext:
    """Return the session context, creating it on first run."""
    if "context" not in st.session_state:
        st.session_state.context = SessionContext()
    return st.session_state.context


def set_context(context: SessionContext) -> None:
    st.session_state.context = context


def load_saved_form(saved: dict[str, Any]) -> None:
    """Button callback: put saved values back into the template's form."""
    st.session_state.setdefault("prefill", {})[saved["template_id"]] = saved["form_data"]
    # Widgets keep their own state; drop it so the prefill is shown
    for field_id in saved["form_data"]:
        st.session_state.pop(f"field_{field_id}", None)


def identity_from_token(token: str) -> Identity | None:
    """Read display claims from an identity token.

    The signature is checked by the API on every call; here the claims only
    feed the sidebar.
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError as e:
        logger.warning(f"Unreadable identity token: {e}")
        return None
    uid = claims.get("sub") or claims.get("user_id")
    if not uid:
        return None
    return Identity(
        uid=str(uid),
        email=claims.get("email"),
        display_name=claims.get("name"),
        photo_url=claims.get("picture"),
    )


# =============================================================================
# UI Components
# =============================================================================


def render_sidebar(client: APIClient) -> None:
    """Render language, theme and sign-in controls."""
    context = get_context()
    language = context.language

    with st.sidebar:
        st.title("📄 " + pick(language, "Documents", "الوثائق"))

        if client.health_check():
            st.success(pick(language, "✅ API connectée", "✅ الخادم متصل"))
        else:
            st.error(pick(language, "❌ API injoignable", "❌ الخادم غير متصل"))
            st.caption(f"API: `{API_BASE_URL}`")

        st.divider()

        choice = st.radio(
            pick(language, "Langue", "اللغة"),
            options=["fr", "ar"],
            format_func=lambda code: {"fr": "Français", "ar": "العربية"}[code],
            index=0 if language == "fr" else 1,
            horizontal=True,
        )
        if choice != language:
            set_context(context.with_language(choice))
            st.rerun()

        st.divider()

        if context.is_authenticated:
            identity = context.identity
            if identity.photo_url:
                st.image(identity.photo_url, width=64)
            st.write(f"**{identity.display_name or identity.email or identity.uid}**")
            if st.button(pick(language, "Se déconnecter", "تسجيل الخروج"), use_container_width=True):
                set_context(context.signed_out())
                st.rerun()
        else:
            token = st.text_input(
                pick(language, "Jeton de connexion", "رمز الدخول"),
                type="password",
                help=pick(language, "Jeton d'identité du fournisseur", "رمز الهوية من مزود الدخول"),
            )
            if st.button(pick(language, "Se connecter", "تسجيل الدخول"), use_container_width=True) and token:
                identity = identity_from_token(token.strip())
                if identity is None:
                    st.error(pick(language, "Jeton invalide", "رمز غير صالح"))
                else:
                    set_context(
                        SessionContext(
                            identity=identity,
                            language=context.language,
                            theme=context.theme,
                            extras={"token": token.strip()},
                        )
                    )
                    st.rerun()


def render_control(spec: ControlSpec, prefill: dict[str, Any]) -> Any:
    """Draw one Streamlit widget for a control spec and return its value."""
    label = f"{spec.label} *" if spec.required else spec.label
    key = f"field_{spec.field_id}"
    initial = prefill.get(spec.field_id)

    match spec.widget:
        case "date_input":
            value = None
            if initial:
                try:
                    value = date.fromisoformat(str(initial))
                except ValueError:
                    value = None
            return st.date_input(label, value=value, key=key, format="DD/MM/YYYY")
        case "text_area":
            return st.text_area(label, value=initial or "", placeholder=spec.placeholder, key=key)
        case "selectbox" | "radio":
            values = [value for value, _ in spec.options]
            labels = dict(spec.options)
            index = values.index(initial) if initial in values else None
            widget = st.selectbox if spec.widget == "selectbox" else st.radio
            return widget(label, options=values, format_func=labels.get, index=index, key=key)
        case "checkbox":
            return st.checkbox(label, value=str(initial).lower() == "true", key=key)
        case _:
            return st.text_input(label, value=initial or "", placeholder=spec.placeholder, key=key)


def render_form(client: APIClient, template: dict[str, Any]) -> None:
    """Render the form of one template with its save and export actions."""
    context = get_context()
    language = context.language
    fields = [FieldDescriptor.model_validate(f) for f in template.get("fields") or []]
    engine = FormEngine(fields)
    prefill = st.session_state.get("prefill", {}).get(template["id"], {})

    st.subheader(pick(language, template["name"], template.get("name_ar")))
    description = pick(language, template.get("description"), template.get("description_ar"))
    if description:
        st.caption(description)

    with st.expander(t("preview", language)):
        renderer = FieldRenderer(language)
        st.markdown(
            renderer.render_preview_html(template.get("markdown_content") or "", fields),
            unsafe_allow_html=True,
        )

    with st.form(key=f"form_{template['id']}"):
        raw = {spec.field_id: render_control(spec, prefill) for spec in engine.controls(language)}
        summary = st.checkbox(pick(language, "Export récapitulatif", "تصدير ملخص"), value=False)

        col1, col2 = st.columns(2)
        with col1:
            save_clicked = st.form_submit_button(t("save", language), use_container_width=True)
        with col2:
            export_clicked = st.form_submit_button(t("generate", language), type="primary", use_container_width=True)

    if not (save_clicked or export_clicked):
        return

    try:
        values = engine.validate(raw, language)
    except FormValidationError as e:
        for field_id, message in e.errors.items():
            st.error(f"{field_id}: {message}")
        return

    if save_clicked:
        if not context.is_authenticated:
            st.warning(t("login_required", language))
            return
        try:
            client.save_form(template["id"], values)
            st.success(t("save_success", language))
        except APIError as e:
            st.error(f"{t('save_failed', language)} ({e.detail})")

    if export_clicked:
        try:
            with st.spinner("PDF..."):
                content, filename = client.export_pdf(template["id"], values, summary=summary)
        except APIError as e:
            for field_id, message in e.errors.items():
                st.error(f"{field_id}: {message}")
            st.error(f"{t('export_failed', language)} ({e.detail})")
            return
        st.success(t("export_success", language))
        st.download_button(
            "⬇️ " + filename,
            data=content,
            file_name=filename,
            mime="application/pdf",
        )


def render_generator(client: APIClient) -> None:
    """Category and template pickers followed by the selected form."""
    language = get_context().language

    try:
        categories = client.list_categories()
    except APIError as e:
        st.error(f"{t('store_error', language)} ({e.detail})")
        return

    if not categories:
        st.info(pick(language, "Aucune catégorie disponible.", "لا توجد فئات متاحة."))
        return

    category = st.selectbox(
        pick(language, "Catégorie", "الفئة"),
        options=categories,
        format_func=lambda c: pick(language, c["name"], c.get("name_ar")),
    )

    try:
        templates = client.list_templates(category_id=category["id"])
    except APIError as e:
        st.error(f"{t('store_error', language)} ({e.detail})")
        return

    if not templates:
        st.info(pick(language, "Aucun modèle dans cette catégorie.", "لا توجد نماذج في هذه الفئة."))
        return

    template = st.selectbox(
        pick(language, "Modèle", "النموذج"),
        options=templates,
        format_func=lambda tpl: pick(language, tpl["name"], tpl.get("name_ar")),
    )

    st.divider()
    render_form(client, template)


def render_dashboard(client: APIClient) -> None:
    """Counters, saved forms and generation history of the signed-in user."""
    context = get_context()
    language = context.language

    if not context.is_authenticated:
        st.info(t("login_required", language))
        return

    try:
        stats = client.stats()
        saved_forms = client.list_saved_forms()
        history = client.history()
    except APIError as e:
        st.error(f"{t('store_error', language)} ({e.detail})")
        return

    col1, col2, col3, col4 = st.columns(4)
    col1.metric(pick(language, "Formulaires", "النماذج المحفوظة"), stats["saved_forms_count"])
    col2.metric(pick(language, "Documents", "الوثائق"), stats["generated_docs_count"])
    col3.metric(pick(language, "Ce mois", "هذا الشهر"), stats["this_month_count"])
    col4.metric(pick(language, "Téléchargements", "التنزيلات"), stats["total_downloads"])

    st.divider()
    st.subheader(pick(language, "Formulaires sauvegardés", "النماذج المحفوظة"))

    if not saved_forms:
        st.caption("-")
    for saved in saved_forms:
        col1, col2, col3 = st.columns([4, 1, 1])
        col1.write(f"**{saved['title']}**")
        col2.button(
            pick(language, "Reprendre", "استئناف"),
            key=f"load_{saved['id']}",
            on_click=load_saved_form,
            args=(saved,),
        )
        if col3.button("🗑️", key=f"delete_{saved['id']}"):
            try:
                client.delete_saved_form(saved["id"])
                st.rerun()
            except APIError as e:
                st.error(e.detail)

    st.divider()
    st.subheader(pick(language, "Historique", "السجل"))
    st.dataframe(
        [
            {
                pick(language, "Titre", "العنوان"): doc["title"],
                pick(language, "Date", "التاريخ"): doc["generated_at"][:16].replace("T", " "),
                pick(language, "Téléchargements", "التنزيلات"): doc["download_count"],
            }
            for doc in history
        ],
        use_container_width=True,
        hide_index=True,
    )


# =============================================================================
# Main App
# =============================================================================


def main() -> None:
    """Main application entry point."""
    context = get_context()
    client = APIClient(API_BASE_URL, context)

    render_sidebar(client)

    if context.is_rtl:
        st.markdown("<style>.main { direction: rtl; text-align: right; }</style>", unsafe_allow_html=True)

    st.title(pick(context.language, "Générateur de documents", "مولد الوثائق"))

    tab1, tab2 = st.tabs(
        [
            pick(context.language, "Nouveau document", "وثيقة جديدة"),
            pick(context.language, "Tableau de bord", "لوحة التحكم"),
        ]
    )

    with tab1:
        render_generator(client)

    with tab2:
        render_dashboard(client)


if __name__ == "__main__":
    main()
