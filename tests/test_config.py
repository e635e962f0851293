"""
Tests for Preferences and environment loading.
Run: pytest tests/test_config.py -v
"""

import pytest

from branch_remote.config import (
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_INTERVAL_MS,
    DEFAULT_TIMEOUT_MS,
    Preferences,
)


class TestPreferences:
    def test_defaults(self):
        p = Preferences()
        assert p.branch_key is None and p.app_key is None
        assert p.timeout == DEFAULT_TIMEOUT_MS == 5500
        assert p.retry_count == DEFAULT_RETRY_COUNT == 3
        assert p.retry_interval == DEFAULT_RETRY_INTERVAL_MS == 1000
        assert p.debug is False
        assert p.warn_on_main_thread is False

    def test_negative_retry_settings_clamped(self):
        p = Preferences(retry_count=-2, retry_interval=-5)
        assert p.retry_count == 0
        assert p.retry_interval == 0

    def test_repr_hides_keys(self):
        assert "key_live_secret" not in repr(Preferences(branch_key="key_live_secret"))


class TestFromEnv:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("BRANCH_KEY", "key_live_env")
        monkeypatch.setenv("BRANCH_APP_KEY", "77")
        monkeypatch.setenv("BRANCH_TIMEOUT_MS", "1500")
        monkeypatch.setenv("BRANCH_RETRY_COUNT", "1")
        monkeypatch.setenv("BRANCH_RETRY_INTERVAL_MS", "20")
        monkeypatch.setenv("BRANCH_DEBUG", "yes")
        monkeypatch.setenv("BRANCH_WARN_MAIN_THREAD", "1")
        p = Preferences.from_env()
        assert p.branch_key == "key_live_env"
        assert p.app_key == "77"
        assert p.timeout == 1500
        assert p.retry_count == 1
        assert p.retry_interval == 20
        assert p.debug is True
        assert p.warn_on_main_thread is True

    def test_blank_keys_are_unset(self, monkeypatch):
        monkeypatch.setenv("BRANCH_KEY", "   ")
        assert Preferences.from_env().branch_key is None

    @pytest.mark.parametrize("value", ["0", "false", "No", "off", ""])
    def test_falsy_flags(self, monkeypatch, value):
        monkeypatch.setenv("BRANCH_DEBUG", value)
        assert Preferences.from_env().debug is False

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("BRANCH_KEY", "from_env")
        p = Preferences.from_env(branch_key="from_arg", retry_count=None)
        assert p.branch_key == "from_arg"
        assert p.retry_count == DEFAULT_RETRY_COUNT

    def test_bad_number_raises(self, monkeypatch):
        monkeypatch.setenv("BRANCH_RETRY_COUNT", "lots")
        with pytest.raises(ValueError):
            Preferences.from_env()

    def test_dotenv_in_cwd(self, tmp_path):
        (tmp_path / ".env").write_text("BRANCH_KEY=key_test_dotenv\nBRANCH_RETRY_COUNT=7\n")
        p = Preferences.from_env()
        assert p.branch_key == "key_test_dotenv"
        assert p.retry_count == 7

    def test_real_env_beats_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("BRANCH_KEY=key_test_dotenv\n")
        monkeypatch.setenv("BRANCH_KEY", "key_test_real")
        assert Preferences.from_env().branch_key == "key_test_real"

    def test_explicit_dotenv_path(self, tmp_path):
        env_file = tmp_path / "conf" / "branch.env"
        env_file.parent.mkdir()
        env_file.write_text("BRANCH_APP_KEY=555\n")
        assert Preferences.from_env(dotenv_path=str(env_file)).app_key == "555"
