"""Tests for converting rendered output into typed results."""

import logging

import pytest

from conftest import mocktemplates_records
from mocktemplates.errors import DeserializationError
from mocktemplates.http import HttpRequest, HttpResponseDTO, TimeUnit
from mocktemplates.serialization import TemplateOutputDeserializer


@pytest.fixture
def deserializer(sink):
    return TemplateOutputDeserializer(sink)


class TestTemplateOutputDeserializer:

    def test_full_response(self, deserializer):
        text = """{
            "statusCode": 404,
            "reasonPhrase": "Not Found",
            "headers": {"X-Id": "1", "Vary": ["Accept", "Origin"]},
            "cookies": {"session": "s1"},
            "body": "missing",
            "delay": {"timeUnit": "SECONDS", "value": 2}
        }"""

        response = deserializer.deserialize(HttpRequest(), text, HttpResponseDTO)

        assert response.status_code == 404
        assert response.reason_phrase == "Not Found"
        assert response.headers == {"X-Id": ["1"], "Vary": ["Accept", "Origin"]}
        assert response.cookies == {"session": "s1"}
        assert response.body == "missing"
        assert response.delay.time_unit == TimeUnit.SECONDS
        assert response.delay.to_seconds() == 2.0

    def test_defaults(self, deserializer):
        response = deserializer.deserialize(HttpRequest(), "{}", HttpResponseDTO)

        assert response.status_code == 200
        assert response.body is None
        assert response.body_bytes() == b""

    def test_invalid_json_raises(self, deserializer, caplog):
        caplog.set_level(logging.INFO, logger="mocktemplates")

        with pytest.raises(DeserializationError) as exc_info:
            deserializer.deserialize(HttpRequest(), "{not json", HttpResponseDTO)

        assert exc_info.value.text == "{not json"
        assert exc_info.value.target == "HttpResponseDTO"
        assert len(mocktemplates_records(caplog, logging.ERROR)) == 1

    def test_invalid_field_raises(self, deserializer):
        with pytest.raises(DeserializationError):
            deserializer.deserialize(HttpRequest(), '{"statusCode": 99}', HttpResponseDTO)

    def test_unknown_field_raises(self, deserializer):
        with pytest.raises(DeserializationError):
            deserializer.deserialize(HttpRequest(), '{"statusCod": 200}', HttpResponseDTO)


class TestHttpResponseDTO:

    def test_json_body(self):
        response = HttpResponseDTO(body={"a": 1})

        assert response.content_type() == "application/json"
        assert response.body_bytes() == b'{"a": 1}'

    def test_explicit_content_type_wins(self):
        response = HttpResponseDTO.model_validate({"headers": {"content-type": "text/xml"}, "body": "<a/>"})

        assert response.content_type() == "text/xml"
        assert response.body_bytes() == b"<a/>"

    @pytest.mark.parametrize("unit, value, seconds", [
        ("MILLISECONDS", 250, 0.25),
        ("SECONDS", 3, 3.0),
        ("MINUTES", 1, 60.0),
    ])
    def test_delay(self, unit, value, seconds):
        response = HttpResponseDTO.model_validate({"delay": {"timeUnit": unit, "value": value}})

        assert response.delay.to_seconds() == seconds
