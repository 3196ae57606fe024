"""
Builds the data a template is rendered against.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..diagnostics import DiagnosticsSink
from ..http import HttpRequest, RequestTemplateObject
from .functions import BUILT_IN_FUNCTIONS, ExtensionKind, QueryFunction

REQUEST_BINDING = "request"
XPATH_BINDING = "xPath"
JSONPATH_BINDING = "jsonPath"

BindingMap = Mapping[str, Any]


class ContextBuilder:
    """Assembles the read-only binding map for one request."""

    def __init__(self, sink: Optional[DiagnosticsSink] = None):
        self.sink = sink or DiagnosticsSink()

    def build(self, request: HttpRequest) -> BindingMap:
        """
        Bind the request view, the built-in functions and the two query lambdas.

        Both query lambdas close over `request` itself, so queries always read
        the body of the request being rendered.
        """
        bindings = {REQUEST_BINDING: RequestTemplateObject(request)}
        bindings.update(BUILT_IN_FUNCTIONS)
        bindings[XPATH_BINDING] = QueryFunction(ExtensionKind.XPATH_QUERY, request, self.sink)
        bindings[JSONPATH_BINDING] = QueryFunction(ExtensionKind.JSONPATH_QUERY, request, self.sink)
        return MappingProxyType(bindings)
