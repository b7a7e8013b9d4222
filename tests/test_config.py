"""
Tests for settings loading.
"""

from rackbeat_sync.config import SyncMode, load_settings


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SYNC_MODE", raising=False)
        monkeypatch.delenv("SHOPIFY_RATE_LIMIT_PER_SECOND", raising=False)

        settings = load_settings(_env_file=None)

        assert settings.sync_mode == SyncMode.SKIP_EXISTING
        assert settings.publish_to_channels is False
        assert settings.shopify_rate_limit_per_second == 2.0
        assert settings.shopify_rate_limit_burst == 40

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("SYNC_MODE", "overwrite_existing")
        monkeypatch.setenv("PUBLISH_TO_CHANNELS", "true")
        monkeypatch.setenv("SHOPIFY_SHOP_NAME", "mystore")

        settings = load_settings(_env_file=None)

        assert settings.sync_mode == SyncMode.OVERWRITE_EXISTING
        assert settings.publish_to_channels is True
        assert settings.shopify_shop_name == "mystore"

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RACKBEAT_API_KEY", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("RACKBEAT_API_KEY=rb_from_file\n", encoding="utf-8")

        settings = load_settings(_env_file=str(env_file))

        assert settings.rackbeat_api_key == "rb_from_file"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("SYNC_MODE", "overwrite_existing")

        settings = load_settings(_env_file=None, sync_mode="skip_existing")

        assert settings.sync_mode == SyncMode.SKIP_EXISTING
