"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError

from pedometer.config import Settings


class TestSettings:
    """Test Settings configuration."""

    def test_default_settings(self):
        """Test default settings values."""
        settings = Settings(_env_file=None)
        assert settings.service_name == "pedometer"
        assert settings.host == "0.0.0.0"
        assert settings.port == 8015
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.environment == "development"

    def test_step_detection_defaults(self):
        """Test detection knobs match the documented defaults."""
        settings = Settings(_env_file=None)
        assert settings.gravity_alpha == 0.8
        assert settings.step_threshold_ms2 == 2.5
        assert settings.min_step_delay_ms == 300.0
        assert settings.step_length_m == 0.762

    def test_archive_and_location_defaults(self):
        """Test archive and location watch defaults."""
        settings = Settings(_env_file=None)
        assert settings.archive_dir == "data"
        assert settings.archive_key == "pedometer_runs"
        assert settings.location_high_accuracy is True
        assert settings.location_timeout_ms == 5000
        assert settings.location_maximum_age_ms == 0
        assert settings.tick_interval_seconds == 1.0

    def test_env_override(self, monkeypatch):
        """Test environment variable override."""
        monkeypatch.setenv("PEDOMETER_PORT", "9000")
        monkeypatch.setenv("PEDOMETER_STEP_THRESHOLD_MS2", "3.1")
        monkeypatch.setenv("PEDOMETER_MIN_STEP_DELAY_MS", "250")
        monkeypatch.setenv("PEDOMETER_LOCATION_HIGH_ACCURACY", "false")

        settings = Settings(_env_file=None)
        assert settings.port == 9000
        assert settings.step_threshold_ms2 == 3.1
        assert settings.min_step_delay_ms == 250.0
        assert settings.location_high_accuracy is False

    def test_prefix_case_insensitive(self, monkeypatch):
        """Test lowercase variables are picked up."""
        monkeypatch.setenv("pedometer_archive_dir", "/tmp/runs")
        settings = Settings(_env_file=None)
        assert settings.archive_dir == "/tmp/runs"

    def test_prefix_required(self, monkeypatch):
        """Test unprefixed variables are ignored."""
        monkeypatch.setenv("PORT", "1234")
        settings = Settings(_env_file=None)
        assert settings.port == 8015


class TestSettingsValidation:
    """Test configuration validation."""

    @pytest.mark.parametrize("alpha", ["0", "1", "1.2", "-0.5"])
    def test_alpha_out_of_range(self, monkeypatch, alpha):
        """Test the smoothing factor must be inside (0, 1)."""
        monkeypatch.setenv("PEDOMETER_GRAVITY_ALPHA", alpha)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_tick_interval_at_most_one_second(self):
        """Test slower live timers are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, tick_interval_seconds=2.0)
        assert Settings(_env_file=None, tick_interval_seconds=0.5).tick_interval_seconds == 0.5

    def test_negative_threshold(self):
        """Test negative knobs are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, step_threshold_ms2=-1)
