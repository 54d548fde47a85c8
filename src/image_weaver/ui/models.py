"""Data models for Image Weaver UI state."""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Generation phases: idle -> loading -> (success | error) -> idle
PHASE_IDLE = "idle"
PHASE_LOADING = "loading"
PHASE_SUCCESS = "success"
PHASE_ERROR = "error"


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each browser session gets its own UIState instance through ``gr.State``,
    so nothing here is shared between users.

    Attributes
    ----------
    uploaded_image : str | None
        Data URL of the most recently accepted upload
    generated_images : list[str]
        Variation URLs currently shown in the results grid
    phase : str
        Current generation phase (one of the PHASE_* constants)
    selected_index : int | None
        Grid cell the copy/download/delete buttons act on
    pending_delete_index : int | None
        Grid cell awaiting delete confirmation
    last_error : str | None
        Message of the last failed generation, cleared on the next attempt
    """

    uploaded_image: str | None = None
    generated_images: list[str] = field(default_factory=list)
    phase: str = PHASE_IDLE
    selected_index: int | None = None
    pending_delete_index: int | None = None
    last_error: str | None = None

    @property
    def is_loading(self) -> bool:
        """True while a flow request is in flight."""
        return self.phase == PHASE_LOADING

    @property
    def selected_url(self) -> str | None:
        """URL of the selected grid cell, or None if nothing valid is selected."""
        if self.selected_index is None:
            return None
        if 0 <= self.selected_index < len(self.generated_images):
            return self.generated_images[self.selected_index]
        return None

    def clear_selection(self) -> None:
        """Forget the selected and pending-delete cells."""
        self.selected_index = None
        self.pending_delete_index = None

    def __repr__(self) -> str:
        return (
            f"UIState(phase={self.phase}, "
            f"uploaded={'yes' if self.uploaded_image else 'no'}, "
            f"results={len(self.generated_images)})"
        )


# Browser-side filename for downloaded variations
DOWNLOAD_FILENAME = "image-variation.png"

# Toast titles
ERROR_TITLE = "Error generating image variations"
COPIED_MESSAGE = "Image URL copied to clipboard"

# Confirmation dialog text
DELETE_CONFIRM_TITLE = "Are you absolutely sure?"
DELETE_CONFIRM_BODY = (
    "This action cannot be undone. The image will be removed from your results."
)
