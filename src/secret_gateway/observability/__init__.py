"""Observability for the secret gateway adapter."""

from .logging import InvocationContext, LogFormat, LogLevel, get_logger, setup_logging

__all__ = ["InvocationContext", "LogFormat", "LogLevel", "get_logger", "setup_logging"]
