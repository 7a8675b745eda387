"""Invocation ID management so every log line of one lookup can be grouped."""

import contextvars
import uuid
from typing import Any

invocation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "invocation_id", default=None
)


class InvocationIDProcessor:
    """Processor to add the current invocation ID to log events."""

    def __init__(self, invocation_id_key: str = "invocation_id"):
        self.invocation_id_key = invocation_id_key

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        invocation_id = get_invocation_id()
        if invocation_id:
            event_dict.setdefault(self.invocation_id_key, invocation_id)
        return event_dict


def get_invocation_id() -> str | None:
    """Get current invocation ID from context."""
    return invocation_id_var.get()


def generate_invocation_id() -> str:
    return str(uuid.uuid4())


class InvocationContext:
    """Context manager binding an invocation ID for the duration of one call."""

    def __init__(self, invocation_id: str | None = None):
        self.invocation_id = invocation_id or generate_invocation_id()
        self.token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> "InvocationContext":
        self.token = invocation_id_var.set(self.invocation_id)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.token:
            invocation_id_var.reset(self.token)
