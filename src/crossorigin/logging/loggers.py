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
"""structlog loggers for crossorigin, backed by stdlib logging.

Every event goes out through ``logging.getLogger(name)``, so the host's
logging setup decides what is shown.  Until it (or :func:`configure_logging`)
lowers the level, only warnings such as ``cors_origin_rejected`` get through;
``cors_preflight`` and ``cors_request_origin_denied`` are debug events.

Configuration keys::

    crossorigin:
      logging:
        format: console        # or json
        level:
          root: WARNING        # the whole crossorigin.* tree
          crossorigin.cors: DEBUG
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from crossorigin.core.config import Config
from crossorigin.kernel.exceptions import ConfigurationException

ROOT_LOGGER = "crossorigin"
LEVEL_SECTION = "crossorigin.logging.level"
FORMAT_KEY = "crossorigin.logging.format"
DEFAULT_LEVEL = "WARNING"
FORMATS = ("console", "json")

_EMIT_PROCESSORS: list[structlog.types.Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.render_to_log_kwargs,
]


def get_logger(name: str) -> Any:
    """Bound structlog logger writing to the stdlib logger *name*.

    Key-value pairs travel as ``extra`` on the ``LogRecord``.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_EMIT_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


class CrossOriginHandler(logging.StreamHandler):
    """Stream handler owned by :func:`configure_logging`."""


def configure_logging(config: Config, stream: TextIO | None = None) -> logging.Logger:
    """Apply ``crossorigin.logging`` from *config* to the ``crossorigin`` logger tree.

    Installs a single :class:`CrossOriginHandler` rendering through
    structlog; calling again replaces it.  Records stop propagating to the
    root logger so they are not printed twice.

    Raises:
        ConfigurationException: On an unknown level name or format.
    """
    levels = dict(config.get_section(LEVEL_SECTION))
    root_level = config.get(f"{LEVEL_SECTION}.root", levels.pop("root", DEFAULT_LEVEL))
    fmt = str(config.get(FORMAT_KEY, "console")).lower()
    if fmt not in FORMATS:
        raise ConfigurationException(
            f"Unknown log format {fmt!r}, expected one of {', '.join(FORMATS)}",
            code="CONFIG_INVALID_LOG_FORMAT",
            context={"key": FORMAT_KEY, "value": fmt},
        )

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in [h for h in logger.handlers if isinstance(h, CrossOriginHandler)]:
        logger.removeHandler(handler)

    handler = CrossOriginHandler(stream or sys.stderr)
    handler.setFormatter(_formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(_level(f"{LEVEL_SECTION}.root", root_level))
    logger.propagate = False

    for name, level in levels.items():
        logging.getLogger(name).setLevel(_level(f"{LEVEL_SECTION}.{name}", level))
    return logger


def _level(key: str, value: Any) -> int:
    name = str(value).upper()
    level = logging.getLevelNamesMapping().get(name)
    if level is None:
        raise ConfigurationException(
            f"Unknown log level {value!r} for {key}",
            code="CONFIG_INVALID_LOG_LEVEL",
            context={"key": key, "value": value},
        )
    return level


def _formatter(fmt: str) -> structlog.stdlib.ProcessorFormatter:
    renderer: structlog.types.Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.ExtraAdder(),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
