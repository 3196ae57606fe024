"""
Error types raised (or recorded) while turning templates into responses.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .diagnostics import format_log_message


class MockTemplatesError(Exception):
    """Base class for errors raised by mocktemplates."""


class TemplateExecutionError(MockTemplatesError):
    """A template failed to compile or execute."""

    def __init__(self, template: str, request: Any, cause: BaseException):
        self.template = template
        self.request = request
        self.cause = cause
        super().__init__(
            format_log_message(
                "Exception:{}transforming template:{}for request:{}",
                describe_cause(cause), template, request
            )
        )


class DeserializationError(MockTemplatesError):
    """Rendered template output could not be converted into the target type."""

    def __init__(self, message: str, text: str, target: str):
        self.text = text
        self.target = target
        super().__init__(message)


def describe_cause(cause: BaseException) -> str:
    """Return the exception message, or its class name when the message is blank."""
    message = str(cause)
    return message if message.strip() else type(cause).__name__


@dataclass(frozen=True)
class QueryEvaluationFailure:
    """Why an embedded xPath / jsonPath query produced no output."""

    query: str
    body: str
    cause: BaseException

    @property
    def message(self) -> str:
        return describe_cause(self.cause)


@dataclass(frozen=True)
class QueryResult:
    """Outcome of a query: exactly one of value / failure is set."""

    value: Optional[str] = None
    failure: Optional[QueryEvaluationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: str) -> "QueryResult":
        return cls(value=value)

    @classmethod
    def failed(cls, query: str, body: str, cause: BaseException) -> "QueryResult":
        return cls(failure=QueryEvaluationFailure(query, body, cause))

    def or_empty(self) -> str:
        """Collapse to the value, or "" on failure."""
        if self.failure is not None or self.value is None:
            return ""
        return self.value
