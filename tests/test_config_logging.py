"""
Tests for settings validation and structured log output
"""

import json
import logging

import pytest
from pydantic import ValidationError as SettingsValidationError

from lumina_ops.config import Settings
from lumina_ops.utils.logging_config import JSONFormatter, request_id_var


class TestSettings:

    def test_defaults(self):
        config = Settings(environment="test", gemini_api_key="")
        assert config.timezone == "Europe/London"
        assert config.turnover_time.hour == 15
        assert config.notification_limit == 10
        assert not config.is_production

    def test_unknown_timezone_rejected(self):
        with pytest.raises(SettingsValidationError):
            Settings(timezone="Mars/Olympus_Mons")

    def test_bad_turnover_time_rejected(self):
        with pytest.raises(SettingsValidationError):
            Settings(turnover_deadline_time="3pm")

    def test_notification_limit_must_be_positive(self):
        with pytest.raises(SettingsValidationError):
            Settings(notification_limit=0)

    def test_cors_origins_are_deduplicated(self):
        config = Settings(allowed_origins="https://ops.example.com/, https://ops.example.com,")
        assert config.cors_origins == ["https://ops.example.com"]


class TestJSONFormatter:

    def test_includes_entity_and_request_context(self):
        record = logging.LogRecord(
            name="lumina_ops.services.job_lifecycle", level=logging.INFO,
            pathname=__file__, lineno=1, msg="Job status changed", args=(), exc_info=None
        )
        record.entity_type = "job"
        record.entity_id = "job-1"
        record.extra_data = {"revision": 3}

        token = request_id_var.set("req-42")
        try:
            data = json.loads(JSONFormatter().format(record))
        finally:
            request_id_var.reset(token)

        assert data["message"] == "Job status changed"
        assert data["request_id"] == "req-42"
        assert data["entity_id"] == "job-1"
        assert data["data"] == {"revision": 3}


# Entry point for running tests
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
