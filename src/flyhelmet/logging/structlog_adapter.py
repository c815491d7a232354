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
"""StructlogAdapter — default LoggingPort implementation using structlog.

Reads::

    flyhelmet:
      logging:
        format: console        # or json
        level:
          root: INFO
          flyhelmet.web: DEBUG

``level`` may also be a single name (``level: DEBUG``) for the root logger.
Records from plain stdlib loggers are rendered the same way as structlog
events.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from flyhelmet.core.config import Config

_FORMATS = ("console", "json")

_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


class StructlogAdapter:
    """Logging adapter backed by structlog over the stdlib ``logging`` module.

    Args:
        stream: Where log lines go. Defaults to ``sys.stderr`` at configure
            time, keeping stdout free for command output.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream
        self.root_level = "INFO"
        self.format = "console"
        self.module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        """Configure structlog and the root handler from ``flyhelmet.logging``."""
        levels = config.get_section("flyhelmet.logging").get("level")
        if isinstance(levels, dict):
            levels = dict(levels)
            self.root_level = str(levels.pop("root", "INFO")).upper()
            self.module_levels = {name: str(level).upper() for name, level in levels.items()}
        elif levels:
            self.root_level = str(levels).upper()

        fmt = str(config.get("flyhelmet.logging.format", "console")).lower()
        self.format = fmt if fmt in _FORMATS else "console"

        self._install()
        for name, level in self.module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_level(level))

    def _renderer(self) -> structlog.types.Processor:
        if self.format == "json":
            return structlog.processors.JSONRenderer()
        return structlog.dev.ConsoleRenderer()

    def _install(self) -> None:
        structlog.configure(
            processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        handler = logging.StreamHandler(self.stream or sys.stderr)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=_PRE_CHAIN,
                processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, self._renderer()],
            )
        )

        root = logging.getLogger()
        root.handlers = [handler]
        root.setLevel(_level(self.root_level))


def configure_logging(config: Config, stream: TextIO | None = None) -> StructlogAdapter:
    """Configure logging from *config* and return the adapter."""
    adapter = StructlogAdapter(stream)
    adapter.configure(config)
    return adapter
