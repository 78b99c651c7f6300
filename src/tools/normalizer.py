"""
Result Normalizer

Wraps adapter results and failures into the uniform ResultEnvelope.

A payload that already contains rendered presentation content is flagged
with ``visualizationComplete`` and passed through as the very same object,
so nothing downstream regenerates or lossily re-serializes it. Rendered
content is recognised by the ``_visualizationComplete`` marker, or by the
``mermaidCode``/``markdownTable`` members that rendering tools return.
"""

import logging
from collections.abc import Mapping
from typing import Any

from src.adapters.results import AdapterFailure, AdapterResult, AdapterSuccess
from src.core.exceptions import ERROR_SUMMARIES, InternalError, ToolGatewayException
from src.models.responses import ResultEnvelope

logger = logging.getLogger(__name__)

VISUALIZATION_MARKER = "_visualizationComplete"

RENDERED_CONTENT_KEYS = ("mermaidCode", "markdownTable")


def is_visualization_complete(data: Any) -> bool:
    """Whether a payload carries already-rendered presentation content."""
    if not isinstance(data, Mapping):
        return False
    if data.get(VISUALIZATION_MARKER) is True:
        return True
    return any(data.get(key) for key in RENDERED_CONTENT_KEYS)


def normalize(result: AdapterResult | BaseException) -> ResultEnvelope:
    """
    Normalize an adapter result or an exception into a ResultEnvelope.

    Args:
        result: AdapterSuccess, AdapterFailure, or an exception caught at the
            dispatcher boundary.

    Returns:
        The result envelope.
    """
    match result:
        case AdapterSuccess(data=data):
            if is_visualization_complete(data):
                return ResultEnvelope(
                    success=True, data=data, visualization_complete=True
                )
            return ResultEnvelope(success=True, data=data)
        case AdapterFailure(error=code, message=message):
            return ResultEnvelope(
                success=False,
                error=f"{code.value}: {message}",
                message=ERROR_SUMMARIES[code],
            )
        case ToolGatewayException():
            return ResultEnvelope(
                success=False,
                error=f"{result.error_code.value}: {result.message}",
                message=result.summary,
            )
        case BaseException():
            logger.error(f"Unexpected error during tool execution: {result!r}")
            return normalize(InternalError(f"{type(result).__name__}: {result}"))
    raise TypeError(f"Cannot normalize {type(result).__name__}")
