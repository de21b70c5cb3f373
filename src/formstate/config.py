"""Form session configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


@dataclass
class FormConfig:
    """Defaults applied to every form session.

    Attributes:
        show_all_errors: Treat every field as visited (surface all errors)
        disabled: Force the derived ``disabled`` flag on
        log_level: Level name for the ``formstate`` logger, or None to leave it
    """

    show_all_errors: bool = False
    disabled: bool = False
    log_level: str | None = None

    @classmethod
    def from_env(cls) -> FormConfig:
        """Create config from environment variables.

        - FORMSTATE_SHOW_ALL_ERRORS: "1"/"true"/"yes"/"on" enables
        - FORMSTATE_DISABLED: same truthy values force the form disabled
        - FORMSTATE_LOG_LEVEL: e.g. "DEBUG"
        """
        level = os.environ.get("FORMSTATE_LOG_LEVEL")
        return cls(
            show_all_errors=_env_flag("FORMSTATE_SHOW_ALL_ERRORS"),
            disabled=_env_flag("FORMSTATE_DISABLED"),
            log_level=level.upper() if level else None,
        )

    def apply_logging(self) -> None:
        """Set the package logger level when ``log_level`` is configured."""
        if self.log_level:
            logging.getLogger("formstate").setLevel(self.log_level)
