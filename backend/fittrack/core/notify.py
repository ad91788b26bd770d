"""Notification sink: transient messages and haptic pulses.

The core only fires and forgets; whoever renders state decides how to show
them.
"""
from __future__ import annotations

import logging

log = logging.getLogger(__name__)

SHORT_PULSE = (50,)
DOUBLE_PULSE = (50, 30, 50)


class Notifier:
    def toast(self, message: str) -> None:
        log.info("toast: %s", message)

    def haptic(self, pattern: tuple[int, ...] = SHORT_PULSE) -> None:
        log.debug("haptic: %s", pattern)


class BufferedNotifier(Notifier):
    """Keeps toasts so a request can hand them back with its response."""

    def __init__(self):
        self.messages: list[str] = []
        self.pulses: list[tuple[int, ...]] = []

    def toast(self, message: str) -> None:
        super().toast(message)
        self.messages.append(message)

    def haptic(self, pattern: tuple[int, ...] = SHORT_PULSE) -> None:
        super().haptic(pattern)
        self.pulses.append(pattern)
