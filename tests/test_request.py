"""Tests for the HttpRequest model."""

import json

import pytest

from mocktemplates.http import HttpRequest


class TestHttpRequest:

    def test_single_values_become_lists(self):
        request = HttpRequest(headers={"Accept": "text/plain"}, query_string_parameters={"id": ["1", "2"]})

        assert request.headers["Accept"] == ["text/plain"]
        assert request.query_string_parameters["id"] == ["1", "2"]

    def test_maps_are_read_only(self):
        request = HttpRequest(headers={"Accept": ["text/plain"]})

        with pytest.raises(TypeError):
            request.headers["Accept"] = ["application/json"]

    def test_fields_are_frozen(self):
        with pytest.raises(AttributeError):
            HttpRequest().path = "/other"

    def test_body_decoded_with_charset(self):
        request = HttpRequest(
            headers={"Content-Type": ["text/plain; charset=ISO-8859-1"]},
            body="café".encode("iso-8859-1"),
        )

        assert request.body_as_json_or_xml_string == "café"

    def test_unknown_charset_falls_back_to_utf8(self):
        request = HttpRequest(headers={"Content-Type": ["text/plain; charset=nope"]}, body="café".encode("utf-8"))

        assert request.body_as_json_or_xml_string == "café"

    def test_bom_is_stripped(self):
        request = HttpRequest(body=b'\xef\xbb\xbf{"a": 1}')

        assert request.body_as_json_or_xml_string == '{"a": 1}'

    def test_no_body_is_empty_string(self):
        assert HttpRequest().body_as_json_or_xml_string == ""

    def test_with_path_parameters(self):
        request = HttpRequest(path="/orders/7")

        matched = request.with_path_parameters({"orderId": "7"})

        assert matched.path_parameters["orderId"] == ["7"]
        assert request.path_parameters == {}

    def test_from_dict(self):
        request = HttpRequest.from_dict({
            "method": "PUT",
            "path": "/a",
            "headers": {"X-Id": ["1"]},
            "cookies": {"session": "s1"},
            "body": {"a": 1},
            "secure": True,
        })

        assert request.method == "PUT"
        assert request.headers["X-Id"] == ["1"]
        assert request.cookies["session"] == "s1"
        assert json.loads(request.body_as_json_or_xml_string) == {"a": 1}
        assert request.secure is True
        assert request.keep_alive is True

    def test_str_is_json(self):
        request = HttpRequest(method="POST", path="/a", body="x")

        assert json.loads(str(request)) == {
            "method": "POST",
            "path": "/a",
            "body": "x",
            "secure": False,
            "keepAlive": True,
        }
