"""Tests for settings and region zones."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from qiniu_client.core.config import Settings, get_settings, reset_settings
from qiniu_client.core.enums import EndpointKind
from qiniu_client.core.exceptions import CallerInputError
from qiniu_client.core.zone import Zone


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self) -> None:
        """Test default values."""
        settings = Settings(_env_file=None)

        assert settings.batch_max_size == 1000
        assert settings.list_page_size == 1000
        assert settings.default_url_lifetime == 3600
        assert settings.use_https is False
        assert settings.credentials_configured is False

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test QINIU_ prefixed variables."""
        monkeypatch.setenv("QINIU_BATCH_MAX_SIZE", "50")
        monkeypatch.setenv("QINIU_USE_HTTPS", "true")
        monkeypatch.setenv("QINIU_ACCESS_KEY", "ak")
        monkeypatch.setenv("QINIU_SECRET_KEY", "sk")

        settings = Settings(_env_file=None)

        assert settings.batch_max_size == 50
        assert settings.credentials_configured is True
        assert settings.uc_url == "https://uc.qbox.me"

    def test_batch_size_bounds(self) -> None:
        """Test that the server-side batch cap is enforced."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, batch_max_size=1001)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, batch_max_size=0)

    def test_service_url(self) -> None:
        """Test scheme selection for fixed hosts."""
        settings = Settings(_env_file=None)

        assert settings.service_url("uc.qbox.me") == "http://uc.qbox.me"
        assert settings.service_url("uc.qbox.me", https=True) == "https://uc.qbox.me"

    def test_cached_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that get_settings caches until reset."""
        reset_settings()
        first = get_settings()
        monkeypatch.setenv("QINIU_LIST_PAGE_SIZE", "10")

        assert get_settings() is first

        reset_settings()
        assert get_settings().list_page_size == 10
        reset_settings()


class TestZone:
    """Tests for region endpoint resolution."""

    @pytest.mark.parametrize(
        ("region", "rs_https"),
        [
            ("z0", "https://rs.qbox.me"),
            ("z1", "https://rs-z1.qbox.me"),
            ("z2", "https://rs-z2.qbox.me"),
            ("na0", "https://rs-na0.qbox.me"),
            ("as0", "https://rs-as0.qbox.me"),
        ],
    )
    def test_from_region(self, region: str, rs_https: str) -> None:
        """Test the known regions."""
        zone = Zone.from_region(region)

        assert zone.region == region
        assert zone.resolve(EndpointKind.RS, True) == rs_https

    def test_resolve_by_name(self) -> None:
        """Test resolving with a plain string kind."""
        assert Zone.huanan().resolve("rsf", False) == "http://rsf-z2.qiniu.com"

    def test_unknown_region(self) -> None:
        """Test that unknown regions are caller errors."""
        with pytest.raises(CallerInputError):
            Zone.from_region("mars")

    def test_unknown_kind(self) -> None:
        """Test that unknown endpoint kinds are caller errors."""
        with pytest.raises(CallerInputError):
            Zone.huadong().resolve("ftp", False)

    def test_missing_endpoint(self) -> None:
        """Test custom zones without an upload host."""
        zone = Zone(region="private")

        assert zone.resolve(EndpointKind.RS, False) == "http://rs.qiniu.com"
        with pytest.raises(CallerInputError):
            zone.resolve(EndpointKind.UP, False)
