"""
Main Streamlit application for the file generator.
Lets the user define a flat record schema and download a synthetic JSON, CSV
or XML file produced by the generation service.
"""

import streamlit as st
import logging

from filegen.config_loader import configure_logging, get_config_value
from filegen.error_handler import ErrorHandler, ErrorType
from filegen.exceptions import FileGenError
from filegen.field_model import FileType, MIN_FILE_SIZE, MAX_FILE_SIZE
from filegen.generation_client import BrowserArtifactSaver
from filegen.schema_editor_view import SchemaEditor
from filegen.session_manager import SessionManager
from filegen.ui_feedback import Notify, show_loading

# Configure logging dynamically from config
try:
    configure_logging()
    logger = logging.getLogger(__name__)
except Exception as e:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.error(f"Failed to configure logging from config: {e}, using INFO level")

page_title = get_config_value('ui', 'page_title', 'File Generator')

st.set_page_config(
    page_title=page_title,
    page_icon="🗂️",
    layout="centered",
)

FILE_TYPE_LABELS = {
    FileType.JSON: "JSON",
    FileType.CSV: "CSV",
    FileType.XML: "XML",
}


def main():
    """Main application entry point."""
    try:
        SessionManager.initialize()

        st.title(page_title)
        render_output_options()
        SchemaEditor.render()
        render_generate_section()
        render_download_section()

    except Exception as e:
        ErrorHandler.handle_error(e, "application", ErrorType.SYSTEM)


def render_output_options():
    """File type and size selection."""
    file_types = list(FileType)
    col1, col2 = st.columns(2)

    with col1:
        selected_type = st.selectbox(
            "File Type:",
            file_types,
            index=file_types.index(SessionManager.get_file_type()),
            format_func=lambda t: FILE_TYPE_LABELS[t],
        )
        SessionManager.set_file_type(selected_type)

    with col2:
        size = st.number_input(
            "File Size (MB):",
            min_value=MIN_FILE_SIZE,
            max_value=MAX_FILE_SIZE,
            value=SessionManager.get_file_size(),
            step=1,
        )
        SessionManager.set_file_size(size)


def render_generate_section():
    """Generate button; disabled while a request is in flight."""
    client = SessionManager.get_client()
    generating = client.is_generating

    if st.button(
        "Generating..." if generating else "Generate File",
        type="primary",
        use_container_width=True,
        disabled=generating,
        key="generate_file",
    ):
        run_generation()


def run_generation():
    store = SessionManager.get_store()
    client = SessionManager.get_client()
    try:
        with show_loading("Generating..."):
            handle = client.generate(
                store,
                SessionManager.get_file_type(),
                SessionManager.get_file_size(),
            )
        Notify.success(f"{handle.filename} is ready ({handle.size:,} bytes)")
    except FileGenError as e:
        ErrorHandler.handle_error(e, "generating file")


def render_download_section():
    """Download button, shown only while a generated file is held."""
    client = SessionManager.get_client()
    handle = client.current_handle
    if handle is None:
        return

    st.download_button(
        "Download File",
        data=handle.data,
        file_name=handle.filename,
        mime=handle.content_type,
        use_container_width=True,
        key="download_file",
        on_click=release_download,
        args=(handle,),
    )


def release_download(handle):
    """Mark the browser download as initiated and free the file."""
    client = SessionManager.get_client()
    ErrorHandler.with_error_handling(
        lambda: client.download(handle, saver=BrowserArtifactSaver()),
        "downloading file",
    )


if __name__ == "__main__":
    main()
