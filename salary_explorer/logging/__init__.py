"""Structured logging for the dashboard components.

Modules take a logger with ``get_logger(__name__, component=...)`` and log
with an ``event`` name in ``extra``. The CLI calls ``configure_logging`` once;
``log_context`` scopes add the active selection to every line.
"""

import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple, Union

from .config import configure_logging
from .context import log_context

__all__ = ["ComponentLoggerAdapter", "configure_logging", "get_logger", "log_context"]


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """Adds ``component`` to each record without clobbering call-site ``extra``."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        call_extra: Dict[str, Any] = kwargs.get("extra") or {}
        kwargs["extra"] = {**self.extra, **call_extra}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Logger for ``name``; wrapped in a ComponentLoggerAdapter when ``component`` is set.

    >>> logger = get_logger(__name__, component="flow")
    >>> logger.debug("Flow graph built", extra={"event": "flow.graph.built"})
    """
    base = logging.getLogger(name)
    return ComponentLoggerAdapter(base, {"component": component}) if component else base
