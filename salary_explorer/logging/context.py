"""Scoped logging context.

Fields pushed here (the active selection, the dispatch generation, the
dataset path) are merged into every log record emitted inside the scope by
``ContextualFilter``. A ContextVar holds them, so a background loader thread
starts with an empty context rather than the caller's selection.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

_active_fields: ContextVar[Dict[str, Any]] = ContextVar("salary_explorer_log_context", default={})


def _present(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return dict(_active_fields.get())


def push_log_context(**fields: Any) -> Token:
    """Layer ``fields`` over the active context and return the reset token.

    None values are dropped, so an unset track never shows up as ``track=None``.
    """
    return _active_fields.set({**_active_fields.get(), **_present(fields)})


def pop_log_context(token: Token) -> None:
    _active_fields.reset(token)


def clear_log_context() -> None:
    _active_fields.set({})


class log_context:
    """``with`` form of push_log_context / pop_log_context.

    Example:
        >>> with log_context(region="CA", generation=4):
        ...     logger.info("Views rebuilt")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token: Optional[Token] = None

    def __enter__(self) -> "log_context":
        self._token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        token, self._token = self._token, None
        if token is not None:
            pop_log_context(token)
        return False
