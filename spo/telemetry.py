"""
Telemetry

Commands describe which options were supplied (never their values); the CLI
hands that to whichever recorder it was given.
"""

import logging
from abc import ABC, abstractmethod

from spo import config

logger = logging.getLogger(__name__)


class TelemetryRecorder(ABC):
    @abstractmethod
    def record(self, command: str, properties: dict):
        """Record one command invocation."""


class NullTelemetry(TelemetryRecorder):
    def record(self, command: str, properties: dict):
        pass


class LoggingTelemetry(TelemetryRecorder):
    """Writes each event to the debug log."""

    def record(self, command: str, properties: dict):
        logger.debug("telemetry command=%s properties=%s", command, properties)


class MemoryTelemetry(TelemetryRecorder):
    """Keeps events in a list; used by tests and embedding callers."""

    def __init__(self):
        self.events = []

    def record(self, command: str, properties: dict):
        self.events.append((command, dict(properties)))


def default_recorder() -> TelemetryRecorder:
    if config.telemetry_disabled():
        return NullTelemetry()
    return LoggingTelemetry()
