import streamlit as st

from utils.api_client import delete_note, error_message, get_note, summarize_note, update_note
from utils.components import note_form, sidebar_nav
from utils.formatting import format_timestamp

st.set_page_config(page_title="Edit note", layout="wide")
sidebar_nav()

st.title("Edit Note")

note_id = st.query_params.get("id") or st.session_state.get("edit_note_id")
if not note_id:
    st.info("Pick a note to edit from the notes list.")
    st.stop()

st.query_params["id"] = note_id


def back_home(message):
    st.session_state.notes = None
    st.session_state.flash = message
    st.session_state.pop("edit_note_id", None)
    st.switch_page("app.py")


resp = get_note(note_id)
if resp.status_code != 200:
    st.error(f"Failed to load note: {error_message(resp)}")
    st.stop()
note = resp.json()

st.caption(
    f"Created {format_timestamp(note['created_at'])} · Updated {format_timestamp(note['updated_at'])}"
)

values = note_form(f"edit-{note_id}", title=note["title"], content=note["content"], submit_label="Save")
if values:
    title, content = values
    save_resp = update_note(note_id, title, content)
    if save_resp.status_code == 200:
        back_home("Note saved")
    else:
        st.error(f"Failed to save note: {error_message(save_resp)}")

st.divider()
st.subheader("AI Summary")

if st.button("Generate AI Summary"):
    with st.spinner("Summarizing..."):
        sum_resp = summarize_note(note_id)
    if sum_resp.status_code == 200:
        note["summary"] = sum_resp.json()["summary"]
    else:
        st.error(f"Summarization failed: {error_message(sum_resp)}")

if note.get("summary"):
    st.text(note["summary"])
else:
    st.caption("No summary yet.")

st.divider()
if st.session_state.get("confirm-delete-edit"):
    st.warning("Delete this note? This cannot be undone.")
    yes_col, no_col = st.columns(2)
    if yes_col.button("Yes, delete"):
        st.session_state.pop("confirm-delete-edit", None)
        del_resp = delete_note(note_id)
        if del_resp.status_code == 200:
            back_home("Note deleted")
        else:
            st.error(f"Failed to delete note: {error_message(del_resp)}")
    if no_col.button("Cancel"):
        st.session_state.pop("confirm-delete-edit", None)
        st.rerun()
elif st.button("Delete note"):
    st.session_state["confirm-delete-edit"] = True
    st.rerun()
