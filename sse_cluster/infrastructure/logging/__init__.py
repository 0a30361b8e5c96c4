"""Logging adapters implementing LoggerProtocol."""

from sse_cluster.infrastructure.logging.console_adapter import ConsoleAdapter

__all__ = ["ConsoleAdapter"]
