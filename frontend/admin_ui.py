"""Streamlit admin area for the document generator.

Gated by the admin credential check. Manages categories and templates;
the template editor derives fields from the Markdown body as it is typed
and shows the same preview users get.
"""

import logging
import os
from typing import Any

import streamlit as st

from docgen.strategies.template_engine import (
    FieldDescriptor,
    FieldExtractor,
    FieldOption,
    FieldRenderer,
    FieldType,
    FieldValidation,
    merge_fields,
)
from frontend.api_client import APIClient, APIError

# Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

# Page config
st.set_page_config(
    page_title="Administration - Documents",
    page_icon="🛠️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

NEW = "__new__"


# =============================================================================
# UI Components
# =============================================================================


def render_login(client: APIClient) -> None:
    """Render the admin credential form."""
    st.title("🛠️ Administration")

    with st.form("admin_login"):
        email = st.text_input("Email")
        password = st.text_input("Mot de passe", type="password")
        submitted = st.form_submit_button("Connexion", type="primary")

    if submitted:
        try:
            ok = client.admin_auth(email, password)
        except APIError as e:
            st.error(f"Erreur serveur: {e.detail}")
            return
        if ok:
            st.session_state.admin = True
            st.rerun()
        st.error("Identifiants invalides")


def render_sidebar(client: APIClient) -> None:
    with st.sidebar:
        st.title("🛠️ Administration")
        if client.health_check():
            st.success("✅ API connectée")
        else:
            st.error("❌ API injoignable")
        st.caption(f"API: `{API_BASE_URL}`")

        st.divider()
        if st.button("Se déconnecter", use_container_width=True):
            st.session_state.admin = False
            st.rerun()


def render_categories(client: APIClient) -> None:
    """List, create, edit and delete categories."""
    try:
        categories = client.list_categories(active_only=False)
    except APIError as e:
        st.error(f"Erreur de chargement: {e.detail}")
        return

    col1, col2 = st.columns([3, 1])
    with col1:
        st.subheader(f"📁 Catégories ({len(categories)})")
    with col2:
        if st.button("Catégories par défaut", use_container_width=True):
            try:
                created = client.seed_categories()
                st.success(f"{created} catégorie(s) créée(s)")
                st.rerun()
            except APIError as e:
                st.error(e.detail)

    for category in categories:
        with st.expander(f"{category['order']}. {category['name']} / {category['name_ar']}"):
            data = category_form(category, key=category["id"])
            col1, col2 = st.columns(2)
            if col1.button("Enregistrer", key=f"save_cat_{category['id']}", type="primary"):
                try:
                    client.update_category(category["id"], data)
                    st.rerun()
                except APIError as e:
                    st.error(e.detail)
            if col2.button("Supprimer", key=f"delete_cat_{category['id']}"):
                try:
                    client.delete_category(category["id"])
                    st.rerun()
                except APIError as e:
                    st.error(e.detail)

    st.divider()
    st.subheader("➕ Nouvelle catégorie")
    data = category_form({}, key=NEW)
    if st.button("Créer la catégorie", type="primary"):
        if not data["name"].strip():
            st.error("Le nom est obligatoire")
            return
        try:
            client.create_category(data)
            st.rerun()
        except APIError as e:
            st.error(e.detail)


def category_form(category: dict[str, Any], key: str) -> dict[str, Any]:
    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Nom", value=category.get("name", ""), key=f"cat_name_{key}")
        description = st.text_area("Description", value=category.get("description", ""), key=f"cat_desc_{key}")
    with col2:
        name_ar = st.text_input("الاسم", value=category.get("name_ar", ""), key=f"cat_name_ar_{key}")
        description_ar = st.text_area("الوصف", value=category.get("description_ar", ""), key=f"cat_desc_ar_{key}")
    col1, col2 = st.columns(2)
    order = col1.number_input("Ordre", min_value=0, value=int(category.get("order", 1)), key=f"cat_order_{key}")
    is_active = col2.checkbox("Active", value=category.get("is_active", True), key=f"cat_active_{key}")
    return {
        "name": name,
        "name_ar": name_ar,
        "description": description,
        "description_ar": description_ar,
        "order": int(order),
        "is_active": is_active,
    }


def render_field_editor(field: FieldDescriptor, key: str) -> FieldDescriptor:
    """Edit the overridable settings of one derived field.

    Args:
        field: Current descriptor.
        key: Widget key prefix.

    Returns:
        The edited descriptor; its id never changes.
    """
    types = [t.value for t in FieldType]
    col1, col2, col3 = st.columns([1, 2, 2])
    with col1:
        field_type = st.selectbox("Type", types, index=types.index(field.type.value), key=f"{key}_type")
        required = st.checkbox("Obligatoire", value=field.required, key=f"{key}_required")
    with col2:
        label = st.text_input("Libellé", value=field.label, key=f"{key}_label")
        placeholder = st.text_input("Indication", value=field.placeholder, key=f"{key}_ph")
    with col3:
        label_ar = st.text_input("التسمية", value=field.label_ar, key=f"{key}_label_ar")
        placeholder_ar = st.text_input("تلميح", value=field.placeholder_ar, key=f"{key}_ph_ar")

    options = field.options
    if field_type in (FieldType.SELECT.value, FieldType.RADIO.value):
        # One option per line: value|label|label_ar
        raw = "\n".join(f"{o.value}|{o.label}|{o.label_ar}" for o in field.options or [])
        raw = st.text_area("Options (valeur|libellé|التسمية)", value=raw, key=f"{key}_options")
        options = [parse_option(line) for line in raw.splitlines() if line.strip()]

    rules = field.validation or FieldValidation()
    col1, col2, col3 = st.columns(3)
    min_len = col1.number_input("Longueur min", min_value=0, value=rules.min or 0, key=f"{key}_min")
    max_len = col2.number_input("Longueur max", min_value=0, value=rules.max or 0, key=f"{key}_max")
    pattern = col3.text_input("Motif (regex)", value=rules.pattern or "", key=f"{key}_pattern")
    validation = None
    if min_len or max_len or pattern:
        validation = FieldValidation(
            min=int(min_len) or None,
            max=int(max_len) or None,
            pattern=pattern or None,
            message=rules.message,
            message_ar=rules.message_ar,
        )

    return FieldDescriptor(
        id=field.id,
        type=FieldType(field_type),
        label=label,
        label_ar=label_ar,
        placeholder=placeholder,
        placeholder_ar=placeholder_ar,
        required=required,
        options=options,
        validation=validation,
    )


def parse_option(line: str) -> FieldOption:
    parts = [part.strip() for part in line.split("|")]
    value = parts[0]
    label = parts[1] if len(parts) > 1 and parts[1] else value
    label_ar = parts[2] if len(parts) > 2 else ""
    return FieldOption(value=value, label=label, label_ar=label_ar)


def render_templates(client: APIClient) -> None:
    """Template list and Markdown editor."""
    try:
        templates = client.list_templates(active_only=False)
        categories = client.list_categories(active_only=False)
    except APIError as e:
        st.error(f"Erreur de chargement: {e.detail}")
        return

    category_names = {c["id"]: c["name"] for c in categories}
    choices = [NEW] + [tpl["id"] for tpl in templates]
    by_id = {tpl["id"]: tpl for tpl in templates}

    selected = st.selectbox(
        "Modèle",
        choices,
        format_func=lambda tid: "➕ Nouveau modèle" if tid == NEW else by_id[tid]["name"],
    )
    template = by_id.get(selected, {})
    key = selected

    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Nom", value=template.get("name", ""), key=f"tpl_name_{key}")
        description = st.text_area("Description", value=template.get("description", ""), key=f"tpl_desc_{key}")
    with col2:
        name_ar = st.text_input("الاسم", value=template.get("name_ar", ""), key=f"tpl_name_ar_{key}")
        description_ar = st.text_area("الوصف", value=template.get("description_ar", ""), key=f"tpl_desc_ar_{key}")

    col1, col2, col3 = st.columns(3)
    category_ids = [None] + list(category_names)
    current_category = template.get("category_id")
    category_id = col1.selectbox(
        "Catégorie",
        category_ids,
        index=category_ids.index(current_category) if current_category in category_ids else 0,
        format_func=lambda cid: "-" if cid is None else category_names[cid],
        key=f"tpl_cat_{key}",
    )
    order = col2.number_input("Ordre", min_value=0, value=int(template.get("order", 1)), key=f"tpl_order_{key}")
    is_active = col3.checkbox("Actif", value=template.get("is_active", True), key=f"tpl_active_{key}")

    st.divider()
    st.subheader("📝 Contenu")
    st.info("💡 Chaque `/nom_du_champ` du texte devient un champ du formulaire.")

    col1, col2 = st.columns(2)
    with col1:
        markdown = st.text_area(
            "Markdown",
            value=template.get("markdown_content", ""),
            height=420,
            key=f"tpl_md_{key}",
        )

    stored = [FieldDescriptor.model_validate(f) for f in template.get("fields") or []]
    fields = merge_fields(FieldExtractor().extract(markdown), stored)

    with col2:
        st.write("**Aperçu**")
        st.markdown(FieldRenderer("fr").render_preview_html(markdown, fields), unsafe_allow_html=True)

    st.divider()
    st.subheader(f"🔧 Champs ({len(fields)})")
    if not fields:
        st.caption("Aucun champ détecté.")

    edited = []
    for field in fields:
        with st.expander(f"/{field.id}"):
            edited.append(render_field_editor(field, key=f"fld_{key}_{field.id}"))

    payload = {
        "name": name,
        "name_ar": name_ar,
        "description": description,
        "description_ar": description_ar,
        "category_id": category_id,
        "order": int(order),
        "is_active": is_active,
        "markdown_content": markdown,
        "fields": [f.model_dump(mode="json") for f in edited],
    }

    st.divider()
    col1, col2 = st.columns(2)
    if col1.button("Enregistrer le modèle", type="primary", use_container_width=True):
        if not name.strip():
            st.error("Le nom est obligatoire")
            return
        try:
            if selected == NEW:
                client.create_template(payload)
            else:
                client.update_template(selected, payload)
            st.success("Modèle enregistré")
            st.rerun()
        except APIError as e:
            st.error(e.detail)
    if selected != NEW and col2.button("Supprimer le modèle", use_container_width=True):
        try:
            client.delete_template(selected)
            st.rerun()
        except APIError as e:
            st.error(e.detail)


# =============================================================================
# Main App
# =============================================================================


def main() -> None:
    """Main application entry point."""
    if "admin" not in st.session_state:
        st.session_state.admin = False

    client = APIClient(API_BASE_URL)

    if not st.session_state.admin:
        render_login(client)
        return

    render_sidebar(client)
    st.title("🛠️ Administration")

    tab1, tab2 = st.tabs(["Modèles", "Catégories"])
    with tab1:
        render_templates(client)
    with tab2:
        render_categories(client)


if __name__ == "__main__":
    main()
