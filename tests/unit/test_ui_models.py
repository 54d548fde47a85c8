"""Unit tests for UI state."""

from image_weaver.ui.models import (
    DOWNLOAD_FILENAME,
    PHASE_IDLE,
    PHASE_LOADING,
    UIState,
)


class TestUIState:
    """Tests for UIState."""

    def test_defaults(self, ui_state):
        """Test a fresh state is idle with an empty grid."""
        assert ui_state.phase == PHASE_IDLE
        assert ui_state.generated_images == []
        assert ui_state.uploaded_image is None
        assert ui_state.selected_url is None
        assert not ui_state.is_loading

    def test_instances_do_not_share_results(self):
        """Test each session gets its own results list."""
        first, second = UIState(), UIState()
        first.generated_images.append("https://example.com/a.png")
        assert second.generated_images == []

    def test_is_loading(self, ui_state):
        ui_state.phase = PHASE_LOADING
        assert ui_state.is_loading

    def test_selected_url(self, ui_state):
        ui_state.generated_images = ["https://a.example/1.png", "https://a.example/2.png"]
        ui_state.selected_index = 1
        assert ui_state.selected_url == "https://a.example/2.png"

    def test_selected_url_out_of_range(self, ui_state):
        """Test a stale index (e.g. after a delete) selects nothing."""
        ui_state.generated_images = ["https://a.example/1.png"]
        ui_state.selected_index = 3
        assert ui_state.selected_url is None

    def test_clear_selection(self, ui_state):
        ui_state.selected_index = 0
        ui_state.pending_delete_index = 0
        ui_state.clear_selection()
        assert ui_state.selected_index is None
        assert ui_state.pending_delete_index is None

    def test_repr_hides_data_url(self, ui_state):
        ui_state.uploaded_image = "data:image/png;base64,AAAA"
        ui_state.generated_images = ["https://a.example/1.png"]
        text = repr(ui_state)
        assert "base64" not in text
        assert "uploaded=yes" in text
        assert "results=1" in text


def test_download_filename():
    assert DOWNLOAD_FILENAME == "image-variation.png"
