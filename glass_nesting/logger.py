# glass_nesting/logger.py
# Lightweight logging for the optimizer: one line per event, "message key=value ...".
# Info goes to stdout, warnings and errors to stderr; debug lines only when verbose.
# A child logger carries bound fields (e.g. the run id) into every line it prints
# and follows its root's enabled/verbose switches.

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


def _format_fields(fields_: Dict[str, Any]) -> str:
    parts = []
    for key, value in fields_.items():
        if isinstance(value, float):
            value = f"{value:.3f}".rstrip("0").rstrip(".")
        parts.append(f"{key}={value}")
    return " ".join(parts)


@dataclass
class Logger:
    enabled: bool = True
    verbose: bool = False
    prefix: str = "[NEST]"
    context: Dict[str, Any] = field(default_factory=dict)
    parent: Optional["Logger"] = None

    def _root(self) -> "Logger":
        return self.parent._root() if self.parent is not None else self

    def _line(self, msg: str, fields_: Dict[str, Any]) -> str:
        tail = _format_fields({**self.context, **fields_})
        return f"{self.prefix} {msg} {tail}" if tail else f"{self.prefix} {msg}"

    def debug(self, msg: str, **fields_: Any) -> None:
        root = self._root()
        if root.enabled and root.verbose:
            print(self._line(msg, fields_), file=sys.stdout)

    def info(self, msg: str, **fields_: Any) -> None:
        if self._root().enabled:
            print(self._line(msg, fields_), file=sys.stdout)

    def warn(self, msg: str, **fields_: Any) -> None:
        if self._root().enabled:
            print(self._line(f"WARNING: {msg}", fields_), file=sys.stderr)

    def error(self, msg: str, **fields_: Any) -> None:
        # printed even when disabled
        print(self._line(f"ERROR: {msg}", fields_), file=sys.stderr)

    def child(self, **fields_: Any) -> "Logger":
        return Logger(prefix=self.prefix, context={**self.context, **fields_}, parent=self)


# Global default logger
LOGGER = Logger(enabled=True)


def set_enabled(flag: bool) -> None:
    LOGGER.enabled = bool(flag)


def set_verbose(flag: bool) -> None:
    LOGGER.verbose = bool(flag)


def get_logger() -> Logger:
    return LOGGER
