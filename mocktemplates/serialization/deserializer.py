"""
Rendered template output -> typed result.
"""

import logging
from typing import Any, Optional, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from ..diagnostics import DiagnosticsSink, LogEntry
from ..errors import DeserializationError

T = TypeVar("T")


class TemplateOutputDeserializer:
    """Validates rendered JSON text into a pydantic model (or any type pydantic can validate)."""

    def __init__(self, sink: Optional[DiagnosticsSink] = None):
        self.sink = sink or DiagnosticsSink()

    def deserialize(self, request: Any, text: str, dto_class: Type[T]) -> T:
        """
        Args:
            request: Request the text was rendered for (used in diagnostics)
            text: Rendered template output, expected to be JSON
            dto_class: Target type

        Raises:
            DeserializationError: text is not valid JSON for dto_class
        """
        target = getattr(dto_class, "__name__", str(dto_class))
        try:
            return TypeAdapter(dto_class).validate_json(text)
        except ValidationError as e:
            self.sink.log_event(
                LogEntry(
                    level=logging.ERROR,
                    http_request=request,
                    message_format="exception transforming json:{}into:{}for request:{}",
                    arguments=(text, target, request),
                    throwable=e,
                )
            )
            raise DeserializationError(
                f"incorrect {target} template output:\n\n{e}", text, target
            ) from e
