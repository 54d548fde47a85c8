"""Tests for image_weaver.core.config — configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the WEAVER_ prefix.
- Provider key aliases (GEMINI_API_KEY / GOOGLE_API_KEY).
- Pydantic validation constraints (upload limit, port range).
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from image_weaver.core.config import (
    DEFAULT_VARIATIONS,
    MAX_VARIATIONS,
    MIN_VARIATIONS,
    WeaverConfig,
)

_KEY_VARS = ("WEAVER_GEMINI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable that could leak into WeaverConfig."""
    for name in _KEY_VARS + (
        "WEAVER_DEFAULT_PROVIDER",
        "WEAVER_GEMINI_MODEL",
        "WEAVER_DEFAULT_VARIATIONS",
        "WEAVER_SERVER_PORT",
        "WEAVER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfigDefaults:
    """Verify that WeaverConfig provides sensible defaults."""

    def test_default_provider_is_gemini(self, clean_env):
        cfg = WeaverConfig(_env_file=None)
        assert cfg.default_provider == "gemini"

    def test_default_model(self, clean_env):
        cfg = WeaverConfig(_env_file=None)
        assert cfg.gemini_model == "gemini-2.0-flash"

    def test_default_variations_is_three(self):
        assert DEFAULT_VARIATIONS == 3

    def test_variation_bounds(self):
        assert (MIN_VARIATIONS, MAX_VARIATIONS) == (1, 5)

    def test_api_key_unset_by_default(self, clean_env):
        cfg = WeaverConfig(_env_file=None)
        assert cfg.gemini_api_key is None

    def test_default_ports(self, clean_env):
        cfg = WeaverConfig(_env_file=None)
        assert cfg.server_port == 7860
        assert cfg.gradio_server_port == 7861
        assert cfg.gradio_share is False


class TestConfigEnvironment:
    """Verify environment variable loading."""

    def test_prefixed_override(self, clean_env):
        clean_env.setenv("WEAVER_GEMINI_MODEL", "gemini-1.5-pro")
        cfg = WeaverConfig(_env_file=None)
        assert cfg.gemini_model == "gemini-1.5-pro"

    def test_case_insensitive(self, clean_env):
        clean_env.setenv("weaver_server_port", "8123")
        cfg = WeaverConfig(_env_file=None)
        assert cfg.server_port == 8123

    @pytest.mark.parametrize("var_name", _KEY_VARS)
    def test_api_key_aliases(self, clean_env, var_name):
        clean_env.setenv(var_name, "secret")
        cfg = WeaverConfig(_env_file=None)
        assert cfg.gemini_api_key == "secret"

    def test_env_file_is_read(self, clean_env, temp_dir):
        env_file = temp_dir / ".env"
        env_file.write_text("WEAVER_SERVER_PORT=9000\nUNRELATED=1\n")
        cfg = WeaverConfig(_env_file=env_file)
        assert cfg.server_port == 9000


class TestConfigValidation:
    """Verify Pydantic constraints."""

    def test_variation_default_is_not_configurable(self, clean_env):
        """WEAVER_DEFAULT_VARIATIONS is ignored; the default stays fixed."""
        clean_env.setenv("WEAVER_DEFAULT_VARIATIONS", "2")
        cfg = WeaverConfig(_env_file=None)
        assert not hasattr(cfg, "default_variations")

    def test_upload_limit_must_be_positive(self, clean_env):
        with pytest.raises(ValidationError):
            WeaverConfig(_env_file=None, max_upload_bytes=0)

    def test_port_below_range(self, clean_env):
        with pytest.raises(ValidationError):
            WeaverConfig(_env_file=None, server_port=80)

    def test_invalid_log_level(self, clean_env):
        with pytest.raises(ValidationError):
            WeaverConfig(_env_file=None, log_level="LOUD")
