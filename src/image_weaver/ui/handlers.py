"""Event handlers for the Image Weaver Gradio UI.

Handlers are plain functions over :class:`~image_weaver.ui.models.UIState`
so they can be unit-tested without a running Gradio server.  Each returns
the values for its Gradio outputs followed by the updated state.

The generate chain wired in :mod:`image_weaver.ui.app` is::

    file.upload -> begin_generation -> handle_upload -> end_generation

``begin_generation`` disables the drop zone and slider so no second request
can start while one is in flight; ``end_generation`` re-enables them.
"""

import logging

import gradio as gr

from image_weaver.core.config import config
from image_weaver.core.errors import FlowError, RequestValidationError
from image_weaver.core.flow import PromptFlow, get_default_flow
from image_weaver.core.intake import read_image_as_data_url

from .models import (
    COPIED_MESSAGE,
    ERROR_TITLE,
    PHASE_ERROR,
    PHASE_IDLE,
    PHASE_LOADING,
    PHASE_SUCCESS,
    UIState,
)

logger = logging.getLogger(__name__)

_flow: PromptFlow | None = None


def get_flow() -> PromptFlow:
    """Return the UI's prompt flow, building it on first use."""
    global _flow
    if _flow is None:
        _flow = get_default_flow(config)
    return _flow


def begin_generation(state: UIState) -> tuple[dict, dict, str, UIState]:
    """Enter the loading phase and lock the upload controls.

    Returns:
        Tuple of (file_update, slider_update, status_markdown, updated_state)
    """
    state.phase = PHASE_LOADING
    state.last_error = None
    return (
        gr.update(interactive=False),
        gr.update(interactive=False),
        "⏳ *Generating variations...*",
        state,
    )


def end_generation(state: UIState) -> tuple[dict, dict, UIState]:
    """Return to idle (keeping any results) and unlock the upload controls.

    Returns:
        Tuple of (file_update, slider_update, updated_state)
    """
    state.phase = PHASE_IDLE
    return gr.update(interactive=True), gr.update(interactive=True), state


def handle_upload(
    file_path: str | None, count: int, state: UIState
) -> tuple[str | None, list[str], str, UIState]:
    """Run the intake filter and the prompt flow for a dropped file.

    On success the results grid is replaced with the returned URLs.  On any
    flow failure exactly one warning toast is shown and the grid is left
    unchanged.  Files rejected by the intake filter never reach the flow.

    Args:
        file_path: Path of the uploaded file, or None if cleared
        count: Requested number of variations (1-5)
        state: UI state

    Returns:
        Tuple of (preview_path, gallery_urls, status_markdown, updated_state)
    """
    if not file_path:
        state.phase = PHASE_IDLE
        return None, state.generated_images, "*Drop an image to get started*", state

    try:
        image_url = read_image_as_data_url(file_path, config.max_upload_bytes)
    except RequestValidationError as e:
        logger.warning(f"Rejected upload: {e}")
        state.phase = PHASE_ERROR
        state.last_error = str(e)
        gr.Warning(f"Unsupported file: {e}")
        return None, state.generated_images, f"❌ {e}", state

    state.uploaded_image = image_url

    try:
        result = get_flow().run(image_url=image_url, number_of_variations=int(count))
    except FlowError as e:
        logger.warning(f"{ERROR_TITLE}: {e}")
        state.phase = PHASE_ERROR
        state.last_error = str(e)
        gr.Warning(f"{ERROR_TITLE}: {e}")
        return file_path, state.generated_images, f"❌ **{ERROR_TITLE}**", state

    state.generated_images = result.urls
    state.clear_selection()
    state.phase = PHASE_SUCCESS

    noun = "variation" if len(result) == 1 else "variations"
    return file_path, state.generated_images, f"✅ Generated {len(result)} {noun}", state


def select_result(evt: gr.SelectData, state: UIState) -> tuple[str, UIState]:
    """Record the grid cell the action buttons should act on.

    Returns:
        Tuple of (selected_url, updated_state)
    """
    index = evt.index
    if not isinstance(index, int) or not 0 <= index < len(state.generated_images):
        state.selected_index = None
        return "", state

    state.selected_index = index
    return state.generated_images[index], state


def copy_image_url(url: str) -> None:
    """Acknowledge a clipboard copy.

    The copy itself happens in the browser (see ``COPY_JS`` in
    :mod:`image_weaver.ui.app`) before this handler runs.
    """
    if not url:
        gr.Warning("Select an image first")
        return
    logger.debug(f"Copied {url}")
    gr.Info(COPIED_MESSAGE)


def download_image(url: str) -> None:
    """Acknowledge a browser download triggered by ``DOWNLOAD_JS``."""
    if not url:
        gr.Warning("Select an image first")
        return
    logger.debug(f"Download triggered for {url}")


def request_delete(state: UIState) -> tuple[dict, UIState]:
    """Open the delete confirmation for the selected cell.

    Returns:
        Tuple of (confirm_group_update, updated_state)
    """
    if state.selected_url is None:
        gr.Warning("Select an image first")
        return gr.update(visible=False), state

    state.pending_delete_index = state.selected_index
    return gr.update(visible=True), state


def cancel_delete(state: UIState) -> tuple[dict, UIState]:
    """Close the confirmation without changing anything.

    Returns:
        Tuple of (confirm_group_update, updated_state)
    """
    state.pending_delete_index = None
    return gr.update(visible=False), state


def confirm_delete(state: UIState) -> tuple[list[str], dict, str, UIState]:
    """Remove the pending cell from this session's results grid.

    Deletion is UI-only: no backend call is made and nothing is persisted.

    Returns:
        Tuple of (gallery_urls, confirm_group_update, selected_url, updated_state)
    """
    index = state.pending_delete_index
    if index is not None and 0 <= index < len(state.generated_images):
        removed = state.generated_images[index]
        state.generated_images = [
            url for i, url in enumerate(state.generated_images) if i != index
        ]
        logger.info(f"Removed variation from session grid: {removed}")

    state.clear_selection()
    return state.generated_images, gr.update(visible=False), "", state
