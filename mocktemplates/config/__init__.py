"""Configuration loading modules."""

from .loaders import ConfigLoader, Expectation
from .settings import Settings

__all__ = ["ConfigLoader", "Expectation", "Settings"]
