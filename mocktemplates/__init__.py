"""Mustache response templates rendered against incoming HTTP requests."""

from .errors import DeserializationError, MockTemplatesError, TemplateExecutionError
from .http import HttpRequest, HttpResponseDTO
from .template import ContextBuilder, MustacheTemplateEngine

__version__ = "1.0.0"

__all__ = [
    "ContextBuilder",
    "DeserializationError",
    "HttpRequest",
    "HttpResponseDTO",
    "MockTemplatesError",
    "MustacheTemplateEngine",
    "TemplateExecutionError",
]
