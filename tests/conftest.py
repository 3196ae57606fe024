"""Shared fixtures for mocktemplates tests."""

import logging

import pytest

from mocktemplates.diagnostics import LOGGER_NAME, DiagnosticsSink
from mocktemplates.http import HttpRequest
from mocktemplates.template import ContextBuilder, MustacheTemplateEngine


@pytest.fixture
def sink():
    """DiagnosticsSink writing to the mocktemplates logger."""
    return DiagnosticsSink(logging.getLogger(LOGGER_NAME))


@pytest.fixture
def engine(sink):
    """MustacheTemplateEngine instance for tests."""
    return MustacheTemplateEngine(sink)


@pytest.fixture
def context_builder(sink):
    """ContextBuilder instance for tests."""
    return ContextBuilder(sink)


@pytest.fixture
def json_request():
    """POST request with a JSON body."""
    return HttpRequest(
        method="POST",
        path="/orders",
        headers={"Content-Type": ["application/json"], "X-Trace": ["abc"]},
        query_string_parameters={"expand": ["items"]},
        body=b'{"a": 5, "name": "Ada", "items": [{"id": "x", "price": 3}, {"id": "y", "price": 12}]}',
    )


@pytest.fixture
def xml_request():
    """POST request with an XML body."""
    return HttpRequest(
        method="POST",
        path="/soap",
        headers={"Content-Type": ["text/xml; charset=utf-8"]},
        body=b'<order id="o1"><a>5</a><item>one</item><item>two</item></order>',
    )


def mocktemplates_records(caplog, level):
    """Records logged under the mocktemplates logger at exactly `level`."""
    return [
        record for record in caplog.records
        if record.name.startswith(LOGGER_NAME) and record.levelno == level
    ]


@pytest.fixture(autouse=True)
def isolate_logger():
    """Undo level/handler changes made by setup_logging() during a test."""
    logger = logging.getLogger(LOGGER_NAME)
    level, handlers = logger.level, list(logger.handlers)
    yield logger
    logger.setLevel(level)
    logger.handlers[:] = handlers
