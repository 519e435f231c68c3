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
"""structlog-backed logging for cookiesession.

Session decisions are logged through named structlog loggers
(``cookiesession.managed``, ``cookiesession.storage``, ...) routed into
stdlib logging, so ``cookiesession.logging.level`` entries control them
like any other logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from cookiesession.config import Config, LoggingProperties


def _processors(output_format: str) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if output_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(config: Config) -> LoggingProperties:
    """Configure structlog and stdlib logging from ``cookiesession.logging``.

    Returns:
        The bound logging properties that were applied.
    """
    properties = config.bind(LoggingProperties)

    structlog.configure(
        processors=_processors(properties.format),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, properties.root_level, logging.INFO),
        force=True,
    )
    for name, level in properties.module_levels.items():
        set_level(name, level)

    return properties


def set_level(name: str, level: str) -> None:
    """Set the log level for a specific stdlib logger."""
    logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)
