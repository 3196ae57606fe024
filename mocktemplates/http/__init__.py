"""HTTP request model and typed response results."""

from .request import HttpRequest, RequestTemplateObject
from .dto import DelayDTO, HttpResponseDTO, TimeUnit

__all__ = ["HttpRequest", "RequestTemplateObject", "DelayDTO", "HttpResponseDTO", "TimeUnit"]
