"""
XPath and JSONPath evaluation against a request body.

Both evaluators return a QueryResult instead of raising: a malformed query,
a body in the wrong format, or a missing match all become a failure value
that callers collapse to empty output.
"""

import json
import math
from decimal import Decimal
from typing import Any

from jsonpath_ng import jsonpath as jp
from jsonpath_ng.ext import parse as jsonpath_parse
from lxml import etree

from ..errors import QueryResult


def _xml_parser() -> etree.XMLParser:
    # lxml parsers must not be shared between threads; build one per query
    return etree.XMLParser(resolve_entities=False, no_network=True)


class NoMatchError(LookupError):
    """A definite JSONPath matched nothing."""


class JSONPathEngine:
    """Evaluates JSONPath expressions against JSON text."""

    @staticmethod
    def is_definite(expression: jp.JSONPath) -> bool:
        """
        True if the path can select at most one value.

        Only root/this, single field names and single indexes are definite;
        wildcards, slices, unions, filters and deep scans are not.
        """
        if isinstance(expression, (jp.Root, jp.This)):
            return True
        if isinstance(expression, jp.Child):
            return JSONPathEngine.is_definite(expression.left) and JSONPathEngine.is_definite(expression.right)
        if isinstance(expression, jp.Fields):
            return len(expression.fields) == 1 and expression.fields[0] != "*"
        if isinstance(expression, jp.Index):
            indices = getattr(expression, "indices", None)
            return indices is None or len(indices) == 1
        return False

    @staticmethod
    def stringify(value: Any) -> str:
        """Strings are returned raw; everything else as compact JSON."""
        if isinstance(value, str):
            return value
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def read(cls, expression: str, body: str) -> str:
        """
        Evaluate `expression` against JSON `body` text.

        Raises:
            ValueError: body is not JSON or the expression does not parse
            NoMatchError: a definite path matched nothing
        """
        document = json.loads(body)
        jsonpath_expr = jsonpath_parse(expression)
        values = [match.value for match in jsonpath_expr.find(document)]

        if not cls.is_definite(jsonpath_expr):
            return cls.stringify(values)
        if not values:
            raise NoMatchError(f"No results for path: {expression}")
        return cls.stringify(values[0])


class XPathEngine:
    """Evaluates XPath 1.0 expressions against XML text."""

    @staticmethod
    def number_to_string(number: float) -> str:
        """XPath number-to-string conversion."""
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        if number == int(number):
            return str(int(number))
        return format(Decimal(repr(number)), "f")

    @classmethod
    def stringify(cls, result: Any) -> str:
        """Coerce an lxml xpath() result with XPath string() semantics."""
        if isinstance(result, bool):
            return "true" if result else "false"
        if isinstance(result, float):
            return cls.number_to_string(result)
        if isinstance(result, list):
            if not result:
                return ""
            return cls.stringify(result[0])
        if isinstance(result, etree._Element):
            return "".join(result.itertext())
        return str(result)

    @classmethod
    def read(cls, expression: str, body: str) -> str:
        """
        Evaluate `expression` against XML `body` text.

        Raises:
            etree.XMLSyntaxError: body is not well-formed XML
            etree.XPathError: the expression does not compile or evaluate
        """
        document = etree.fromstring(body.encode("utf-8"), parser=_xml_parser())
        compiled = etree.XPath(expression)
        return cls.stringify(compiled(document))


def evaluate_json_path(query: str, body: str) -> QueryResult:
    """Evaluate a JSONPath query against the body, collapsing any failure into the result."""
    try:
        return QueryResult.success(JSONPathEngine.read(query, body))
    except Exception as e:
        return QueryResult.failed(query, body, e)


def evaluate_xpath(query: str, body: str) -> QueryResult:
    """Evaluate an XPath query against the body, collapsing any failure into the result."""
    try:
        return QueryResult.success(XPathEngine.read(query, body))
    except Exception as e:
        return QueryResult.failed(query, body, e)
