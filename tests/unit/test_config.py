import os

import pytest

from gemini_tutor.config import TutorSettings, load_settings
from gemini_tutor.exceptions import MissingKeyError


@pytest.mark.unit
class TestTutorSettings:
    """Environment-backed endpoint settings"""

    def test_defaults(self):
        settings = TutorSettings()
        assert settings.api_key is None
        assert settings.model == "gemini-2.0-flash"
        assert settings.use_real_api is False
        assert settings.timeout_seconds == 60.0

    def test_reads_gemini_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
        monkeypatch.setenv("GEMINI_USE_REAL_API", "true")
        monkeypatch.setenv("GEMINI_TIMEOUT_SECONDS", "15")

        settings = TutorSettings()

        assert settings.api_key == "env-key"
        assert settings.model == "gemini-2.5-pro"
        assert settings.use_real_api is True
        assert settings.timeout_seconds == 15.0

    def test_summary_redacts_key(self):
        summary = TutorSettings(api_key="secret").get_summary()
        assert summary["api_key"] == "[SET]"
        assert "secret" not in str(summary)


@pytest.mark.unit
class TestLoadSettings:
    """Settings loading and error mapping"""

    def test_overrides_win_over_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_MODEL", "from-env")
        assert load_settings(model="from-override").model == "from-override"

    def test_real_api_without_key_raises_missing_key(self):
        with pytest.raises(MissingKeyError, match="API Key is missing"):
            load_settings(use_real_api=True)

    def test_real_api_with_key_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        monkeypatch.setenv("GEMINI_USE_REAL_API", "1")
        settings = load_settings()
        assert settings.use_real_api
        assert settings.api_key == "env-key"

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_non_positive_timeout_is_rejected(self, timeout):
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_settings(timeout_seconds=timeout)

    def test_empty_model_is_rejected(self):
        with pytest.raises(ValueError):
            load_settings(model="")

    def test_env_file_is_read_when_requested(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("GEMINI_MODEL=from-dotenv\nGEMINI_API_KEY=file-key\n")

        settings = load_settings(env_file=env_file)

        assert settings.model == "from-dotenv"
        assert settings.api_key == "file-key"

    def test_env_file_is_ignored_by_default(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("GEMINI_MODEL=from-dotenv\n")
        monkeypatch.chdir(tmp_path)
        assert load_settings().model == "gemini-2.0-flash"


@pytest.mark.unit
class TestEnvironmentIsolation:
    """GEMINI_* isolation between tests"""

    def test_gemini_env_is_cleared_by_default(self):
        assert not [key for key in os.environ if key.startswith("GEMINI_")]

    def test_pollution_marker_is_registered(self, pytestconfig):
        markers = pytestconfig.getini("markers")
        assert any(m.startswith("allow_env_pollution:") for m in markers)

    @pytest.mark.allow_env_pollution
    def test_pollution_marker_keeps_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
        assert TutorSettings().model == "gemini-2.5-pro"
