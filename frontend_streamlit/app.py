import streamlit as st

from utils.api_client import delete_note, error_message, list_notes, summarize_note
from utils.components import note_card, sidebar_nav

PAGE_SIZE = 20

st.set_page_config(page_title="Quillnote", layout="wide")
sidebar_nav()

st.title("My Notes")

if "notes" not in st.session_state:
    st.session_state.notes = None
if "next_cursor" not in st.session_state:
    st.session_state.next_cursor = None


def load_notes(cursor=None):
    resp = list_notes(limit=PAGE_SIZE, cursor=cursor)
    if resp.status_code != 200:
        st.error(f"Failed to load notes: {error_message(resp)}")
        st.stop()
    data = resp.json()
    if cursor:
        st.session_state.notes.extend(data["notes"])
    else:
        st.session_state.notes = data["notes"]
    st.session_state.next_cursor = data["next_cursor"] if data["has_more"] else None


def refresh():
    st.session_state.notes = None
    st.rerun()


def open_editor(note_id):
    st.session_state.edit_note_id = note_id
    st.switch_page("pages/2_Edit_Note.py")


def summarize(note_id):
    with st.spinner("Summarizing..."):
        resp = summarize_note(note_id)
    if resp.status_code == 200:
        st.session_state.flash = "Summary updated"
        refresh()
    else:
        st.error(f"Summarization failed: {error_message(resp)}")


def remove(note_id):
    resp = delete_note(note_id)
    if resp.status_code == 200:
        st.session_state.flash = "Note deleted"
        refresh()
    else:
        st.error(f"Failed to delete note: {error_message(resp)}")


if st.session_state.notes is None:
    load_notes()

flash = st.session_state.pop("flash", None)
if flash:
    st.success(flash)

notes = st.session_state.notes
if not notes:
    st.info("No notes yet. Create one from the sidebar.")
    if st.button("Create a note"):
        st.switch_page("pages/1_Create_Note.py")
else:
    for note in notes:
        note_card(note, on_edit=open_editor, on_summarize=summarize, on_delete=remove)

    if st.session_state.next_cursor and st.button("Load more"):
        load_notes(st.session_state.next_cursor)
        st.rerun()
