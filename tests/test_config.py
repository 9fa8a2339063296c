"""
Tests for configuration loading.
"""

import pytest

from barberbook.config import AppConfig
from barberbook.domain.slot_grid import DEFAULT_SLOT_GRID, HOURLY_SLOT_GRID


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_KEY", raising=False)

        config = AppConfig()

        assert config.slot_grid == list(DEFAULT_SLOT_GRID)
        assert config.fail_open is True
        assert config.fallback_closed_weekdays == [1]
        assert config.timezone == "America/Sao_Paulo"
        assert config.supabase_key == ""

    def test_load_from_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "supabase_url: https://demo.supabase.co\n"
            "supabase_key: secret\n"
            "fail_open: false\n"
            "slot_grid: ['17:00', '09:00', '10:00', '11:00', '12:00', '13:00', '14:00', '15:00', '16:00']\n"
            "admin_emails: ['Owner@Example.com']\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_file)

        assert config.supabase_url == "https://demo.supabase.co"
        assert config.fail_open is False
        assert config.slot_grid == list(HOURLY_SLOT_GRID)
        assert config.admin_emails == ["owner@example.com"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("slot_grid: [09:00\n", encoding="utf-8")

        with pytest.raises(ValueError):
            AppConfig.load_from_yaml(config_file)

    def test_non_mapping_root(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_file)

    @pytest.mark.parametrize("field,value", [
        ("slot_grid", ["9:00"]),
        ("slot_grid", []),
        ("fallback_closed_weekdays", [7]),
        ("timezone", "Mars/Olympus"),
        ("log_level", "LOUD"),
        ("admin_emails", ["not-an-email"]),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            AppConfig(**{field: value})

    def test_slot_step_rebuilds_grid(self):
        """A step regenerates the grid between the first and last configured time."""
        config = AppConfig(slot_grid=["09:00", "12:00"], slot_step_minutes=60)

        assert config.slot_grid == ["09:00", "10:00", "11:00", "12:00"]

    def test_slot_step_must_be_positive(self):
        with pytest.raises(ValueError):
            AppConfig(slot_step_minutes=0)

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_KEY", "from-env")

        assert AppConfig().supabase_key == "from-env"
        assert AppConfig(supabase_key="from-file").supabase_key == "from-file"

    def test_is_admin(self):
        """The allowlist check ignores case and surrounding spaces."""
        config = AppConfig(admin_emails=["owner@example.com"])

        assert config.is_admin(" OWNER@example.com ")
        assert not config.is_admin("someone@example.com")
        assert not config.is_admin("")
