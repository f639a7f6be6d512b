"""
Error handling utilities for the batcher.
Errors carry a trace of the functions they passed through.
"""

import inspect
from types import FrameType
from typing import Optional


class BatcherError(Exception):
    """
    Enhanced error class with trace information.
    Wrapping another BatcherError keeps the original exception and extends the trace.
    """

    def __init__(self, trace: str, original: Exception):
        """Initialize BatcherError with original error and trace."""
        traceWithFunction = trace
        current_frame = inspect.currentframe()

        frame: Optional[FrameType] = None
        if current_frame is not None:
            frame = current_frame.f_back
            # Subclass constructors are not part of the trace.
            while frame is not None and frame.f_locals.get("self") is self:
                frame = frame.f_back

        if frame:
            traceWithFunction = f"{frame.f_code.co_name} - {trace}"

        if isinstance(original, BatcherError):
            self.original = original.original
            self.trace = original.trace + [traceWithFunction]
        else:
            self.original = original
            self.trace = [traceWithFunction]

        super().__init__(str(self.original))

    def __str__(self) -> str:
        """Return formatted error message with trace."""
        return f"{str(self.original)} | Trace: {', '.join(self.trace)}"


class NotFoundError(BatcherError):
    """
    Raised when no checkpoint matches a batch id and token.
    A wrong token is reported exactly like a missing batch.
    """

    def __init__(self, batch_id: int):
        self.batch_id = batch_id
        super().__init__(f"load batch {batch_id}", LookupError("No active batch."))


class TransportPreconditionError(BatcherError):
    """Raised when a polling request does not meet its transport requirements."""

    def __init__(self, trace: str, message: str):
        super().__init__(trace, ValueError(message))
