# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for crossorigin's stdlib-backed structlog loggers."""

import io
import json
import logging

import pytest

from crossorigin.core.config import Config
from crossorigin.kernel.exceptions import ConfigurationException
from crossorigin.logging import CrossOriginHandler, configure_logging, get_logger


@pytest.fixture(autouse=True)
def _restore_crossorigin_loggers():
    yield
    for name in ("crossorigin", "crossorigin.cors", "crossorigin.web"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


def _logging_config(**section) -> Config:
    return Config({"crossorigin": {"logging": section}})


class TestGetLogger:
    def test_debug_is_dropped_by_default(self, caplog):
        get_logger("crossorigin.cors").debug("cors_preflight", origin="http://a.com")
        assert caplog.records == []

    def test_warning_reaches_stdlib_with_fields_as_extra(self, caplog):
        get_logger("crossorigin.cors").warning("cors_origin_rejected", origin="example.com")

        [record] = caplog.records
        assert record.name == "crossorigin.cors"
        assert record.getMessage() == "cors_origin_rejected"
        assert record.origin == "example.com"

    def test_level_follows_stdlib_logger(self, caplog):
        caplog.set_level(logging.DEBUG, logger="crossorigin")
        get_logger("crossorigin.cors").debug("cors_preflight", origin="http://a.com")
        assert [r.getMessage() for r in caplog.records] == ["cors_preflight"]


class TestConfigureLogging:
    def test_defaults_to_warning(self):
        logger = configure_logging(Config({}), stream=io.StringIO())

        assert logger.name == "crossorigin"
        assert logger.level == logging.WARNING
        assert logger.propagate is False

    def test_console_output_hides_debug(self):
        stream = io.StringIO()
        configure_logging(Config({}), stream=stream)
        log = get_logger("crossorigin.cors")

        log.debug("cors_preflight", origin="http://a.com")
        log.warning("cors_origin_rejected", origin="example.com")

        output = stream.getvalue()
        assert "cors_preflight" not in output
        assert "cors_origin_rejected" in output
        assert "origin=example.com" in output

    def test_json_format(self):
        stream = io.StringIO()
        configure_logging(_logging_config(format="json"), stream=stream)

        get_logger("crossorigin.cors").warning("cors_origin_rejected", origin="example.com")

        event = json.loads(stream.getvalue())
        assert event["event"] == "cors_origin_rejected"
        assert event["origin"] == "example.com"
        assert event["level"] == "warning"
        assert event["logger"] == "crossorigin.cors"

    def test_root_and_module_levels(self):
        stream = io.StringIO()
        config = _logging_config(level={"root": "error", "crossorigin.cors": "debug"})
        configure_logging(config, stream=stream)

        assert logging.getLogger("crossorigin").level == logging.ERROR
        assert logging.getLogger("crossorigin.cors").level == logging.DEBUG

        get_logger("crossorigin.cors").debug("cors_preflight", origin="http://a.com")
        get_logger("crossorigin.web").warning("ignored")
        assert "cors_preflight" in stream.getvalue()
        assert "ignored" not in stream.getvalue()

    def test_root_level_env_override(self, monkeypatch):
        monkeypatch.setenv("CROSSORIGIN_LOGGING_LEVEL_ROOT", "DEBUG")
        logger = configure_logging(Config({}), stream=io.StringIO())
        assert logger.level == logging.DEBUG

    def test_reconfiguring_replaces_handler(self):
        configure_logging(Config({}), stream=io.StringIO())
        logger = configure_logging(Config({}), stream=io.StringIO())

        assert len([h for h in logger.handlers if isinstance(h, CrossOriginHandler)]) == 1

    def test_unknown_level_raises(self):
        with pytest.raises(ConfigurationException) as exc_info:
            configure_logging(_logging_config(level={"root": "LOUD"}))

        assert exc_info.value.code == "CONFIG_INVALID_LOG_LEVEL"
        assert exc_info.value.context["key"] == "crossorigin.logging.level.root"

    def test_unknown_format_raises(self):
        with pytest.raises(ConfigurationException) as exc_info:
            configure_logging(_logging_config(format="xml"))

        assert exc_info.value.code == "CONFIG_INVALID_LOG_FORMAT"
