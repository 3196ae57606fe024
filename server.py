#!/usr/bin/env python3
"""
server.py - Template-driven mock HTTP server

FastAPI-based server that answers any request by rendering the Mustache
response template of the first matching expectation in the config directory.

Configuration comes from the environment (see mocktemplates.config.Settings):
    MOCKTEMPLATES_CONFIG_DIR  - expectation/template directory (default: configs)
    MOCKTEMPLATES_LOG_LEVEL   - TRACE, DEBUG, INFO, ... (default: INFO)
    MOCKTEMPLATES_LOG_FORMAT  - human or json (default: human)
"""

import asyncio
import logging

from fastapi import FastAPI, HTTPException, Request, Response

from mocktemplates import __version__
from mocktemplates.config import ConfigLoader, Settings
from mocktemplates.diagnostics import setup_logging
from mocktemplates.errors import DeserializationError, TemplateExecutionError
from mocktemplates.http import HttpRequest, HttpResponseDTO
from mocktemplates.rendering import ResponseRenderer
from mocktemplates.template import MustacheTemplateEngine

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

logger = logging.getLogger("mocktemplates.server")


def create_app(settings: Settings) -> FastAPI:
    """Build the FastAPI app for the given settings."""
    app = FastAPI(title="Mock Templates", version=__version__)

    config_loader = ConfigLoader(settings.config_dir)
    response_renderer = ResponseRenderer(config_loader, MustacheTemplateEngine())

    @app.get("/mocktemplates/status")
    async def status():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.api_route("/{request_path:path}", methods=ALL_METHODS)
    async def respond(request: Request):
        """
        Render the response for any request.

        Returns:
            The rendered response; 404 if no expectation matches
        """
        http_request = await to_http_request(request)
        try:
            response = response_renderer.render_response(http_request)
        except (TemplateExecutionError, DeserializationError) as e:
            logger.error("failed to render response for %s %s", http_request.method, http_request.path)
            raise HTTPException(status_code=500, detail=str(e))

        if response is None:
            raise HTTPException(status_code=404, detail=f"No expectation matches {http_request.method} {http_request.path}")

        if response.delay is not None:
            await asyncio.sleep(response.delay.to_seconds())
        return to_response(response)

    return app


async def to_http_request(request: Request) -> HttpRequest:
    """Capture a Starlette request, body included, as an HttpRequest."""
    headers = {}
    for name, value in request.headers.items():
        headers.setdefault(name, []).append(value)
    query_string_parameters = {}
    for name, value in request.query_params.multi_items():
        query_string_parameters.setdefault(name, []).append(value)

    body = await request.body()
    return HttpRequest(
        method=request.method,
        path=request.url.path,
        query_string_parameters=query_string_parameters,
        headers=headers,
        cookies=dict(request.cookies),
        body=body or None,
        secure=request.url.scheme == "https",
        keep_alive=request.headers.get("connection", "keep-alive").lower() != "close",
    )


def to_response(response: HttpResponseDTO) -> Response:
    """Convert a rendered HttpResponseDTO into a Starlette response."""
    media_type = response.content_type()
    starlette_response = Response(
        content=response.body_bytes(),
        status_code=response.status_code,
        media_type=media_type,
    )
    for name, values in response.headers.items():
        if name.lower() == "content-type":
            continue
        for value in values:
            starlette_response.headers.append(name, value)
    for name, value in response.cookies.items():
        starlette_response.set_cookie(name, value)
    return starlette_response


settings = Settings.from_env()
setup_logging(settings.log_level_value, settings.log_format)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
