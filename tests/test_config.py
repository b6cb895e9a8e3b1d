"""Tests for settings loading."""

from pathlib import Path

from promptstitch.config import Settings, load_settings
from promptstitch.llm.gemini_client import GEMINI_MODEL


def _write_config(project_dir: Path, text: str) -> None:
    config_dir = project_dir / ".promptstitch"
    config_dir.mkdir(exist_ok=True)
    (config_dir / "config.yaml").write_text(text)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self, temp_dir: Path) -> None:
        """Test a project without config gets the defaults."""
        settings = load_settings(temp_dir, environ={})

        assert settings == Settings()
        assert settings.model == GEMINI_MODEL
        assert settings.max_requests_per_minute == 9
        assert settings.user_id == "local"
        assert not settings.has_api_key

    def test_reads_yaml(self, temp_dir: Path) -> None:
        """Test values come from the config file."""
        _write_config(
            temp_dir,
            "api_key: file-key\nmodel: other-model\nmax_requests_per_minute: '5'\nunknown: 1\n",
        )

        settings = load_settings(temp_dir, environ={})

        assert settings.api_key == "file-key"
        assert settings.model == "other-model"
        assert settings.max_requests_per_minute == 5

    def test_environment_overrides(self, temp_dir: Path) -> None:
        """Test environment variables win over the file."""
        _write_config(temp_dir, "api_key: file-key\nuser_id: alice\n")

        settings = load_settings(
            temp_dir,
            environ={"GEMINI_API_KEY": "env-key", "PROMPTSTITCH_USER": "bob"},
        )

        assert settings.api_key == "env-key"
        assert settings.user_id == "bob"

    def test_malformed_file_is_ignored(self, temp_dir: Path) -> None:
        """Test a broken config falls back to defaults."""
        _write_config(temp_dir, "api_key: [unclosed\n")

        settings = load_settings(temp_dir, environ={"GEMINI_API_KEY": "env-key"})

        assert settings.api_key == "env-key"
        assert settings.model == GEMINI_MODEL

    def test_non_mapping_is_ignored(self, temp_dir: Path) -> None:
        """Test a YAML list is ignored."""
        _write_config(temp_dir, "- a\n- b\n")

        assert load_settings(temp_dir, environ={}) == Settings()


class TestSettings:
    """Tests for Settings helpers."""

    def test_storage_path_relative(self, temp_dir: Path) -> None:
        """Test relative storage dirs resolve against the project."""
        assert Settings().storage_path(temp_dir) == temp_dir / ".promptstitch" / "prompts"

    def test_storage_path_absolute(self, temp_dir: Path) -> None:
        """Test absolute storage dirs are used as is."""
        settings = Settings(storage_dir=str(temp_dir / "elsewhere"))

        assert settings.storage_path("/ignored") == temp_dir / "elsewhere"

    def test_rate_limiter(self) -> None:
        """Test the limiter uses the configured cap."""
        assert Settings(max_requests_per_minute=4).make_rate_limiter().max_requests == 4
