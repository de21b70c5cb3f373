"""Session lifecycle for formstate.

A form session is live from creation until ``close()``. Work that settles
after the session has closed (most notably a pending submit action) must not
write into torn-down state: guarded writes are dropped silently once closed.
"""

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class SessionLifecycle:
    """Tracks whether a form session is still live.

    Example:
        lifecycle = SessionLifecycle("signup")
        set_flag = lifecycle.guard(lambda value: ...)
        lifecycle.close()
        set_flag(False)  # dropped
    """

    def __init__(self, label: str = "form"):
        self.label = label
        self._live = True

    @property
    def is_live(self) -> bool:
        return self._live

    def close(self) -> None:
        """End the session. Idempotent."""
        if self._live:
            logger.debug("Session '%s' closed", self.label)
        self._live = False

    def guard(self, write: Callable[..., Any]) -> Callable[..., None]:
        """Wrap ``write`` so calls after ``close()`` are no-ops."""

        def guarded(*args: Any, **kwargs: Any) -> None:
            if not self._live:
                logger.debug(
                    "Session '%s' is closed; dropping late write %s",
                    self.label,
                    getattr(write, "__name__", write),
                )
                return
            write(*args, **kwargs)

        return guarded
