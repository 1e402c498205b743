import streamlit as st

from utils.formatting import format_timestamp, preview


def sidebar_nav():
    st.sidebar.title("Quillnote")
    st.sidebar.page_link("app.py", label="All notes")
    st.sidebar.page_link("pages/1_Create_Note.py", label="New note")


def note_form(key: str, title: str = "", content: str = "", submit_label: str = "Save"):
    """Title + content form. Returns (title, content) on a valid submit, else None."""
    with st.form(key):
        new_title = st.text_input("Title", value=title, max_chars=200)
        new_content = st.text_area("Content", value=content, height=300)
        submitted = st.form_submit_button(submit_label, type="primary")

    if not submitted:
        return None
    if not new_title.strip() or not new_content.strip():
        st.error("Title and content are required.")
        return None
    return new_title.strip(), new_content


def note_card(note: dict, on_edit, on_summarize, on_delete):
    note_id = note["id"]
    with st.container(border=True):
        st.subheader(note["title"])
        st.write(preview(note["content"]))
        st.caption(
            f"Created {format_timestamp(note.get('created_at'))} · "
            f"Updated {format_timestamp(note.get('updated_at'))}"
        )
        if note.get("summary"):
            with st.expander("AI summary"):
                st.text(note["summary"])

        edit_col, summarize_col, delete_col = st.columns(3)
        if edit_col.button("Edit", key=f"edit-{note_id}"):
            on_edit(note_id)
        if summarize_col.button("Summarize", key=f"summarize-{note_id}"):
            on_summarize(note_id)

        confirm_key = f"confirm-delete-{note_id}"
        if st.session_state.get(confirm_key):
            st.warning("Delete this note? This cannot be undone.")
            yes_col, no_col = st.columns(2)
            if yes_col.button("Yes, delete", key=f"delete-yes-{note_id}"):
                st.session_state.pop(confirm_key, None)
                on_delete(note_id)
            if no_col.button("Cancel", key=f"delete-no-{note_id}"):
                st.session_state.pop(confirm_key, None)
                st.rerun()
        elif delete_col.button("Delete", key=f"delete-{note_id}"):
            st.session_state[confirm_key] = True
            st.rerun()
