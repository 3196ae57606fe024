"""Expectation matching and response rendering."""

from .matcher import ExpectationMatcher
from .response_renderer import ResponseRenderer

__all__ = ["ExpectationMatcher", "ResponseRenderer"]
