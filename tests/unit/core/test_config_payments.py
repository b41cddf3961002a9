"""Unit tests for payment and URL settings."""

from common.core.config import Settings
from common.core.constants import Environment


class TestPaymentSettings:
    """Settings load from the environment with safe defaults."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PAYMENTS_ENABLED", raising=False)
        monkeypatch.delenv("PAYMENTS_VERIFY_BILLING_TOKEN", raising=False)

        settings = Settings(_env_file=None)

        assert settings.payments_enabled is False
        assert settings.payments_verify_billing_token is False
        assert settings.rate_limit_storage_uri == "memory://"

    def test_gate_from_environment(self, monkeypatch):
        monkeypatch.setenv("PAYMENTS_ENABLED", "true")
        monkeypatch.setenv("PAYMENTS_SIDECAR_URL", "http://billing:9000/")

        settings = Settings(_env_file=None)

        assert settings.payments_enabled is True
        assert settings.payments_sidecar_url == "http://billing:9000"

    def test_app_url_gets_trailing_slash(self):
        settings = Settings(_env_file=None, app_url="https://git.example.com")
        assert settings.app_url == "https://git.example.com/"

    def test_app_url_keeps_trailing_slash(self):
        settings = Settings(_env_file=None, app_url="https://git.example.com/")
        assert settings.app_url == "https://git.example.com/"

    def test_database_url_from_components(self):
        settings = Settings(
            _env_file=None,
            db_user="billing",
            db_password="secret",
            db_host="db",
            db_port=5433,
            db_name="orgs",
        )
        assert settings.database_url == "postgresql://billing:secret@db:5433/orgs"

    def test_cors_origins_outside_local(self):
        settings = Settings(
            _env_file=None,
            environment=Environment.PRODUCTION,
            app_url="https://git.example.com/",
        )
        assert settings.cors_allowed_origins == ["https://git.example.com"]
