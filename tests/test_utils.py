"""
Tests for configuration and media validation helpers.
"""

import logging

import pytest

from utils.app_settings import AppSettings
from utils.logging_config import _parse_level
from utils.media_validation import decoded_size, validate_image_data_uri


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings.from_env({})

        assert settings.pin_length == 6
        assert settings.session_duration_ms == 3_600_000
        assert settings.session_duration_s == 3600.0
        assert settings.allowed_origins == ("*",)
        assert settings.port == 3001

    def test_reads_environment(self):
        settings = AppSettings.from_env(
            {
                "PIN_LENGTH": "4",
                "SESSION_DURATION_MS": "1000",
                "ALLOWED_ORIGINS": "https://a.example, https://b.example",
                "LOG_LEVEL": "debug",
                "PORT": "8080",
            }
        )

        assert settings.pin_length == 4
        assert settings.session_duration_s == 1.0
        assert settings.allowed_origins == ("https://a.example", "https://b.example")
        assert settings.log_level == "DEBUG"
        assert settings.port == 8080

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_rejects_bad_numbers(self, value):
        with pytest.raises(RuntimeError):
            AppSettings.from_env({"SESSION_DURATION_MS": value})


class TestLogLevel:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("debug", logging.DEBUG),
            ("WARNING", logging.WARNING),
            ("15", 15),
            ("", logging.INFO),
            (None, logging.INFO),
            ("nonsense", logging.INFO),
        ],
    )
    def test_parse_level(self, value, expected):
        assert _parse_level(value, logging.INFO) == expected


class TestImageValidation:
    PNG = "data:image/png;base64,iVBORw0KGgo="

    def test_accepts_png_data_uri(self):
        assert validate_image_data_uri(self.PNG, 1024) == self.PNG

    def test_accepts_mime_parameters(self):
        value = "data:image/jpeg;name=photo.jpg;base64,/9j/4AAQ"
        assert validate_image_data_uri(value, 1024) == value

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "iVBORw0KGgo=",
            "data:text/plain;base64,aGVsbG8=",
            "data:image/png;base64,",
            "data:image/png;base64,***",
            "data:image/png,rawbytes",
        ],
    )
    def test_rejects_bad_payloads(self, value):
        with pytest.raises(ValueError):
            validate_image_data_uri(value, 1024)

    def test_rejects_oversized_images(self):
        big = "data:image/png;base64," + "A" * 4000
        with pytest.raises(ValueError, match="exceeds"):
            validate_image_data_uri(big, 1024)

    def test_decoded_size(self):
        assert decoded_size("iVBORw0KGgo=") == 8
        assert decoded_size("AAAA") == 3
