"""
Incoming request model and its read-only template projection.
"""

import json
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

MultiValueMap = Mapping[str, List[str]]

_UTF8_BOM = "\ufeff"


def _freeze(values: Optional[Mapping[str, Any]]) -> Mapping[str, List[str]]:
    """Copy a multi-value map into a read-only mapping of lists."""
    frozen: Dict[str, List[str]] = {}
    for name, value in (values or {}).items():
        if isinstance(value, (list, tuple)):
            frozen[name] = [str(v) for v in value]
        else:
            frozen[name] = [str(value)]
    return MappingProxyType(frozen)


def _charset(content_type: Optional[str]) -> str:
    """Extract charset from a Content-Type value, defaulting to utf-8."""
    if content_type:
        for param in content_type.split(";")[1:]:
            key, _, value = param.partition("=")
            if key.strip().lower() == "charset" and value.strip():
                return value.strip().strip('"')
    return "utf-8"


@dataclass(frozen=True)
class HttpRequest:
    """An HTTP request as received by the mock server."""

    method: str = "GET"
    path: str = "/"
    path_parameters: MultiValueMap = field(default_factory=dict)
    query_string_parameters: MultiValueMap = field(default_factory=dict)
    headers: MultiValueMap = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    body: Union[bytes, str, None] = None
    secure: bool = False
    keep_alive: bool = True

    def __post_init__(self):
        object.__setattr__(self, "path_parameters", _freeze(self.path_parameters))
        object.__setattr__(self, "query_string_parameters", _freeze(self.query_string_parameters))
        object.__setattr__(self, "headers", _freeze(self.headers))
        object.__setattr__(self, "cookies", MappingProxyType(dict(self.cookies or {})))

    @property
    def content_type(self) -> Optional[str]:
        for name, values in self.headers.items():
            if name.lower() == "content-type" and values:
                return values[0]
        return None

    @property
    def body_as_json_or_xml_string(self) -> str:
        """Body decoded to text using the request charset; "" when there is no body."""
        if self.body is None:
            return ""
        if isinstance(self.body, bytes):
            try:
                text = self.body.decode(_charset(self.content_type), errors="replace")
            except LookupError:
                text = self.body.decode("utf-8", errors="replace")
        else:
            text = self.body
        if text.startswith(_UTF8_BOM):
            text = text[1:]
        return text

    def with_path_parameters(self, path_parameters: Mapping[str, Any]) -> "HttpRequest":
        """Return a copy with additional path parameters."""
        merged = dict(self.path_parameters)
        merged.update(_freeze(path_parameters))
        return replace(self, path_parameters=merged)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"method": self.method, "path": self.path}
        if self.path_parameters:
            data["pathParameters"] = dict(self.path_parameters)
        if self.query_string_parameters:
            data["queryStringParameters"] = dict(self.query_string_parameters)
        if self.headers:
            data["headers"] = dict(self.headers)
        if self.cookies:
            data["cookies"] = dict(self.cookies)
        body = self.body_as_json_or_xml_string
        if body:
            data["body"] = body
        data["secure"] = self.secure
        data["keepAlive"] = self.keep_alive
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HttpRequest":
        """
        Build a request from its JSON shape.

        A JSON object or array body is serialized back to text; everything
        else is taken as a string.
        """
        body = data.get("body")
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        return cls(
            method=data.get("method", "GET"),
            path=data.get("path", "/"),
            path_parameters=data.get("pathParameters") or {},
            query_string_parameters=data.get("queryStringParameters") or {},
            headers=data.get("headers") or {},
            cookies=data.get("cookies") or {},
            body=body,
            secure=bool(data.get("secure", False)),
            keep_alive=bool(data.get("keepAlive", True)),
        )

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


class RequestTemplateObject:
    """
    Read-only view of an HttpRequest exposed to templates as `request`.

    Multi-valued maps are addressed by name then index, e.g.
    {{request.headers.Accept.0}} or {{request.queryStringParameters.id.0}}.
    Both camelCase and snake_case attribute names are available.
    """

    __slots__ = ("_request",)

    def __init__(self, request: HttpRequest):
        object.__setattr__(self, "_request", request)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is read-only")

    @property
    def request(self) -> HttpRequest:
        return self._request

    @property
    def method(self) -> str:
        return self._request.method

    @property
    def path(self) -> str:
        return self._request.path

    @property
    def path_parameters(self) -> MultiValueMap:
        return self._request.path_parameters

    pathParameters = path_parameters

    @property
    def query_string_parameters(self) -> MultiValueMap:
        return self._request.query_string_parameters

    queryStringParameters = query_string_parameters

    @property
    def headers(self) -> MultiValueMap:
        return self._request.headers

    @property
    def cookies(self) -> Mapping[str, str]:
        return self._request.cookies

    @property
    def body(self) -> str:
        return self._request.body_as_json_or_xml_string

    @property
    def secure(self) -> bool:
        return self._request.secure

    @property
    def keep_alive(self) -> bool:
        return self._request.keep_alive

    keepAlive = keep_alive

    def __str__(self) -> str:
        return str(self._request)

    def __repr__(self) -> str:
        return f"RequestTemplateObject({self._request.method} {self._request.path})"
