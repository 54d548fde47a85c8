"""Shared pytest fixtures for Image Weaver tests."""

import json
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from image_weaver.core.config import WeaverConfig
from image_weaver.core.flow import PromptFlow
from image_weaver.core.providers import ModelProviderBase
from image_weaver.ui.models import UIState

SAMPLE_URLS = [
    "https://images.example.com/variation-1.png",
    "https://images.example.com/variation-2.png",
    "https://images.example.com/variation-3.png",
]


class FakeProvider(ModelProviderBase):
    """In-memory provider that records calls and replays a canned reply."""

    name = "fake"
    description = "In-memory provider for tests"

    def __init__(self, config: WeaverConfig, reply: str = "[]", error: Exception | None = None):
        super().__init__(config)
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    def generate(self, prompt: str, *, image: tuple[str, bytes] | None = None) -> str:
        self.calls.append({"prompt": prompt, "image": image})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config() -> WeaverConfig:
    """Create a test configuration that ignores any local .env file."""
    return WeaverConfig(
        _env_file=None,
        default_provider="gemini",
        gemini_api_key="test-key",
        gemini_model="gemini-2.0-flash",
        max_upload_bytes=1024 * 1024,
    )


@pytest.fixture
def fake_provider(test_config: WeaverConfig) -> FakeProvider:
    """Provider that returns the three SAMPLE_URLS."""
    return FakeProvider(test_config, reply=json.dumps(SAMPLE_URLS))


@pytest.fixture
def failing_provider(test_config: WeaverConfig) -> FakeProvider:
    """Provider whose call always fails with a connection error."""
    return FakeProvider(test_config, error=ConnectionError("network unreachable"))


@pytest.fixture
def flow(fake_provider: FakeProvider) -> PromptFlow:
    """Prompt flow bound to the fake provider."""
    return PromptFlow(fake_provider)


@pytest.fixture
def sample_png(temp_dir: Path) -> Path:
    """Write a small PNG image and return its path."""
    path = temp_dir / "sample.png"
    Image.new("RGB", (16, 16), color=(200, 30, 30)).save(path, format="PNG")
    return path


@pytest.fixture
def sample_jpeg(temp_dir: Path) -> Path:
    """Write a small JPEG image with a .jpeg extension and return its path."""
    path = temp_dir / "sample.jpeg"
    Image.new("RGB", (16, 16), color=(30, 30, 200)).save(path, format="JPEG")
    return path


@pytest.fixture
def text_file(temp_dir: Path) -> Path:
    """Write a plain text file and return its path."""
    path = temp_dir / "notes.txt"
    path.write_text("not an image\n")
    return path


@pytest.fixture
def ui_state() -> UIState:
    """Create empty UI state for testing."""
    return UIState()


@pytest.fixture
def test_client(fake_provider: FakeProvider):
    """FastAPI TestClient whose prompt flow uses the fake provider.

    The lifespan is not entered, so no real provider is constructed.
    """
    from fastapi.testclient import TestClient

    from image_weaver.api.main import app, get_flow

    app.dependency_overrides[get_flow] = lambda: PromptFlow(fake_provider)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
