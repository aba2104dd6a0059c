"""
Results — The declared success / fallback contract of every metric.

Each metric entry point returns a ComputationResult instead of raising:

    ok                 data computed from the real input
    insufficient_data  too few points; data is empty or the input echoed back
    fallback           input was empty; data is a sample placeholder
    error              an unexpected exception was caught at the boundary

The @computation decorator is that boundary. The wrapped function names its
own fallback, so the safe value is part of the function's signature, not
something a caller has to guess.
"""

from __future__ import annotations

import functools
import logging
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ResultStatus(str, Enum):
    OK = "ok"
    INSUFFICIENT_DATA = "insufficient_data"
    FALLBACK = "fallback"
    ERROR = "error"


class ErrorKind(str, Enum):
    MALFORMED_FIELD = "malformed_field"
    INSUFFICIENT_DATA = "insufficient_data"
    INTERNAL = "internal"


class ComputationError(BaseModel):
    kind: ErrorKind
    detail: str = ""


class ComputationResult(BaseModel):
    """A derived series (or scalar bundle) plus how it was obtained."""

    status: ResultStatus = ResultStatus.OK
    data: Any = None
    message: Optional[str] = None
    error: Optional[ComputationError] = None

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.OK

    @property
    def needs_more_data(self) -> bool:
        """True when the renderer should show a 'need more data' message."""
        return self.status in (ResultStatus.INSUFFICIENT_DATA, ResultStatus.FALLBACK)

    @classmethod
    def success(cls, data: Any, message: str | None = None) -> "ComputationResult":
        return cls(status=ResultStatus.OK, data=data, message=message)

    @classmethod
    def insufficient(cls, data: Any, message: str) -> "ComputationResult":
        return cls(
            status=ResultStatus.INSUFFICIENT_DATA,
            data=data,
            message=message,
            error=ComputationError(kind=ErrorKind.INSUFFICIENT_DATA, detail=message),
        )

    @classmethod
    def sample(cls, data: Any, message: str) -> "ComputationResult":
        return cls(status=ResultStatus.FALLBACK, data=data, message=message)

    def derived_from_sample(self, message: str) -> "ComputationResult":
        """
        Re-flag a result computed on sample input as FALLBACK.

        Error results keep their status; anything else becomes a placeholder.
        """
        if self.status == ResultStatus.ERROR:
            return self
        return self.model_copy(update={"status": ResultStatus.FALLBACK, "message": message})


def computation(fallback: Callable[[], Any], name: str | None = None):
    """
    Catch-all boundary for a metric function.

    Args:
        fallback: Zero-arg factory for the safe value used on failure
                  (e.g. ``list`` or ``lambda: SAMPLE_DEMAND_DATA``).
        name:     Label used in the log line. Defaults to the function name.

    A wrapped function may return a ComputationResult or bare data; bare
    data is wrapped as an ``ok`` result.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., ComputationResult]:
        label = name or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> ComputationResult:
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                logger.error("Computation %s failed: %s", label, exc, exc_info=True)
                return ComputationResult(
                    status=ResultStatus.ERROR,
                    data=fallback(),
                    message=f"Error processing {label.replace('_', ' ')}",
                    error=ComputationError(kind=ErrorKind.INTERNAL, detail=str(exc)),
                )
            if isinstance(result, ComputationResult):
                return result
            return ComputationResult.success(result)

        return wrapper

    return decorator
