import streamlit as st

from utils.api_client import create_note, error_message
from utils.components import note_form, sidebar_nav

st.set_page_config(page_title="New note", layout="wide")
sidebar_nav()

st.title("Create Note")

values = note_form("create-note", submit_label="Create")
if values:
    title, content = values
    resp = create_note(title, content)
    if resp.status_code == 201:
        # Home reloads the list on its next render
        st.session_state.notes = None
        st.session_state.flash = "Note created"
        st.switch_page("app.py")
    else:
        st.error(f"Failed to create note: {error_message(resp)}")
