"""Tests for the HTTP server."""

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mocktemplates.config import Settings
from server import create_app

SHIPPED_CONFIG_DIR = Path(__file__).parent.parent / "configs"


def write_expectation(config_dir, name, request_matcher, template):
    expectations_dir = config_dir / "expectations"
    expectations_dir.mkdir(parents=True, exist_ok=True)
    config = {"httpRequest": request_matcher, "httpResponseTemplate": {"template": template}}
    (expectations_dir / f"{name}.json").write_text(json.dumps(config))


@pytest.fixture
def shipped_client():
    """Client for the sample expectations in configs/."""
    return TestClient(create_app(Settings(config_dir=str(SHIPPED_CONFIG_DIR))))


@pytest.fixture
def client(tmp_path):
    """Client for expectations written by each test."""
    write_expectation(tmp_path, "broken", {"path": "/broken"}, "{{#a}}x{{/b}}")
    write_expectation(tmp_path, "not_json", {"path": "/not-json"}, "hello {{request.path}}")
    write_expectation(
        tmp_path, "bad_query", {"path": "/bad-query"},
        '{"body": {"value": "{{#jsonPath}}$.a{{/jsonPath}}", "path": "{{request.path}}"}}',
    )
    write_expectation(
        tmp_path, "extras", {"method": "GET", "path": "/extras"},
        '{"statusCode": 202, "headers": {"X-Mock": ["one", "two"]}, "cookies": {"session": "s1"}, '
        '"body": "ok", "delay": {"timeUnit": "MILLISECONDS", "value": 1}}',
    )
    return TestClient(create_app(Settings(config_dir=str(tmp_path))))


class TestShippedExpectations:

    def test_order_created(self, shipped_client):
        response = shipped_client.post("/orders", json={"id": "A1", "customer": {"name": "Ada"}})

        assert response.status_code == 201
        assert response.headers["location"] == "/orders/A1"
        body = response.json()
        assert body["id"] == "A1"
        assert body["customer"] == "Ada"
        assert body["created"].endswith("Z")
        assert "traceId" not in body

    def test_order_created_with_trace(self, shipped_client):
        response = shipped_client.post("/orders?trace=1", json={"id": "A1", "customer": {"name": "Ada"}})

        assert response.status_code == 201
        assert "traceId" in response.json()

    def test_order_lookup(self, shipped_client):
        response = shipped_client.get("/orders/42")

        assert response.status_code == 200
        assert response.json() == {"id": "42", "method": "GET"}

    def test_soap_quote(self, shipped_client):
        response = shipped_client.post(
            "/soap/quote",
            content="<quoteRequest><symbol>IBM</symbol></quoteRequest>",
            headers={"Content-Type": "text/xml"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/xml")
        assert "<symbol>IBM</symbol>" in response.text


class TestServer:

    def test_status(self, client):
        response = client.get("/mocktemplates/status")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_no_match(self, client):
        response = client.get("/nothing/here")

        assert response.status_code == 404
        assert "GET /nothing/here" in response.json()["detail"]

    def test_broken_template(self, client):
        response = client.get("/broken")

        assert response.status_code == 500
        assert "transforming template" in response.json()["detail"]

    def test_output_not_a_response(self, client):
        response = client.get("/not-json")

        assert response.status_code == 500
        assert "HttpResponseDTO" in response.json()["detail"]

    def test_bad_query_still_responds(self, client):
        response = client.post("/bad-query", content="<a>5</a>", headers={"Content-Type": "text/xml"})

        assert response.status_code == 200
        assert response.json() == {"value": "", "path": "/bad-query"}

    def test_headers_cookies_and_status(self, client):
        response = client.get("/extras")

        assert response.status_code == 202
        assert response.headers.get_list("x-mock") == ["one", "two"]
        assert response.cookies["session"] == "s1"
        assert response.text == "ok"
