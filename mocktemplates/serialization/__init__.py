"""Conversion of rendered template output into typed results."""

from .deserializer import TemplateOutputDeserializer

__all__ = ["TemplateOutputDeserializer"]
