"""
Functions callable from templates.

Every function exposed to a template is an ExtensionFunction of a fixed
kind. In a section tag ({{#name}}fragment{{/name}}) the engine substitutes
the fragment first and then calls write(fragment, out); built-ins can also be
used as plain variables ({{name}}), which writes the same value.
"""

import base64
import io
import logging
import random
import secrets
import uuid
from datetime import datetime, timezone
from email.utils import format_datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, TextIO

from ..diagnostics import TRACE, DiagnosticsSink, LogEntry
from ..errors import QueryResult
from ..http import HttpRequest
from .queries import evaluate_json_path, evaluate_xpath


# Function to get current datetime - can be overridden in tests
_get_current_datetime: Callable[[], datetime] = lambda: datetime.now(timezone.utc)


class ExtensionKind(Enum):
    BUILT_IN = "built-in"
    XPATH_QUERY = "xPath"
    JSONPATH_QUERY = "jsonPath"


class ExtensionFunction:
    """Base for template functions; subclasses implement write()."""

    kind: ExtensionKind

    def write(self, fragment: str, out: TextIO) -> None:
        raise NotImplementedError

    def __call__(self, text: str, render: Callable[[str], str]) -> str:
        """Mustache lambda entry point: substitute the inner text, then write."""
        out = io.StringIO()
        self.write(render(text), out)
        return out.getvalue()


class BuiltInFunction(ExtensionFunction):
    """A value computed each time the template writes it."""

    kind = ExtensionKind.BUILT_IN

    def __init__(self, name: str, supplier: Callable[[], Any]):
        self.name = name
        self.supplier = supplier

    def write(self, fragment: str, out: TextIO) -> None:
        out.write(str(self))

    def __str__(self) -> str:
        return str(self.supplier())

    def __repr__(self) -> str:
        return f"BuiltInFunction({self.name})"


_QUERY_LANGUAGES = {
    ExtensionKind.XPATH_QUERY: ("xPath", "xml", evaluate_xpath),
    ExtensionKind.JSONPATH_QUERY: ("jsonPath", "json", evaluate_json_path),
}


class QueryFunction(ExtensionFunction):
    """
    Evaluates the fragment as a query against one request's body.

    A failed query writes nothing and logs one INFO record; it never raises
    into the template render.
    """

    def __init__(self, kind: ExtensionKind, request: HttpRequest, sink: DiagnosticsSink):
        if kind not in _QUERY_LANGUAGES:
            raise ValueError(f"Not a query function kind: {kind}")
        self.kind = kind
        self.request = request
        self.sink = sink
        self.language, self.body_format, self.evaluator = _QUERY_LANGUAGES[kind]

    def evaluate(self, query: str) -> QueryResult:
        return self.evaluator(query, self.request.body_as_json_or_xml_string)

    def write(self, fragment: str, out: TextIO) -> None:
        result = self.evaluate(fragment)
        if result.failure is not None:
            self.sink.log_event(
                LogEntry(
                    level=logging.INFO,
                    http_request=self.request,
                    message_format=f"exception evaluating {self.language}:{{}}against {self.body_format} body:{{}}",
                    arguments=(result.failure.query, result.failure.body),
                    throwable=result.failure.cause,
                )
            )
            return
        if self.sink.is_enabled(TRACE):
            self.sink.log_event(
                LogEntry(
                    level=TRACE,
                    http_request=self.request,
                    message_format=f"evaluated {self.language}:{{}}against {self.body_format} body:{{}}as:{{}}",
                    arguments=(fragment, self.request.body_as_json_or_xml_string, result.value),
                )
            )
        out.write(result.or_empty())

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return f"QueryFunction({self.language})"


def _now_iso_8601() -> str:
    return _get_current_datetime().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _now_epoch() -> int:
    return int(_get_current_datetime().timestamp())


def _now_rfc_1123() -> str:
    return format_datetime(_get_current_datetime(), usegmt=True)


def _rand_bytes(size: int) -> Callable[[], str]:
    return lambda: base64.b64encode(secrets.token_bytes(size)).decode("ascii")


BUILT_IN_FUNCTIONS: Mapping[str, BuiltInFunction] = MappingProxyType({
    name: BuiltInFunction(name, supplier)
    for name, supplier in [
        ("now", _now_iso_8601),
        ("now_iso_8601", _now_iso_8601),
        ("now_epoch", _now_epoch),
        ("now_rfc_1123", _now_rfc_1123),
        ("uuid", lambda: str(uuid.uuid4())),
        ("rand_int_10", lambda: random.randrange(10)),
        ("rand_int_100", lambda: random.randrange(100)),
        ("rand_bytes", _rand_bytes(16)),
        ("rand_bytes_16", _rand_bytes(16)),
        ("rand_bytes_32", _rand_bytes(32)),
        ("rand_bytes_64", _rand_bytes(64)),
        ("rand_bytes_128", _rand_bytes(128)),
    ]
})
