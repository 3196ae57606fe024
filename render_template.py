#!/usr/bin/env python3
"""
render_template.py - Render a response template against a sample request

Developer tool for trying out templates without starting the server.

Usage:
    render_template.py order.mustache request.json
    render_template.py order.mustache request.json --raw --log-level TRACE

The request file uses the same JSON shape as HttpRequest.from_dict():
    {"method": "POST", "path": "/orders", "headers": {"Content-Type": ["application/json"]},
     "body": {"id": 7}}
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from mocktemplates.diagnostics import parse_level, setup_logging
from mocktemplates.errors import DeserializationError, TemplateExecutionError
from mocktemplates.http import HttpRequest, HttpResponseDTO
from mocktemplates.template import MustacheTemplateEngine


def load_request(request_path: str) -> HttpRequest:
    """Load a request JSON file."""
    request_file = Path(request_path)
    if not request_file.exists():
        raise FileNotFoundError(f"Request file not found: {request_path}")

    with open(request_file, encoding="utf-8") as f:
        return HttpRequest.from_dict(json.load(f))


def load_template(template_path: str) -> str:
    """Load a template file."""
    template_file = Path(template_path)
    if not template_file.exists():
        raise FileNotFoundError(f"Template file not found: {template_path}")

    with open(template_file, encoding="utf-8") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Render a Mustache response template against a request"
    )
    parser.add_argument("template_file", help="Path to the Mustache template")
    parser.add_argument("request_file", help="Path to the request JSON file")
    parser.add_argument("--raw", action="store_true", help="Print the rendered text instead of the validated response")
    parser.add_argument("--log-level", default="WARNING", help="Diagnostics level, e.g. TRACE, DEBUG, INFO (default: WARNING)")

    args = parser.parse_args(argv)

    try:
        setup_logging(parse_level(args.log_level))
        template = load_template(args.template_file)
        request = load_request(args.request_file)
        engine = MustacheTemplateEngine()

        if args.raw:
            print(engine.render(template, engine.context_builder.build(request)))
        else:
            response = engine.execute_template(template, request, HttpResponseDTO)
            print(response.model_dump_json(by_alias=True, exclude_none=True, indent=2))
    except (FileNotFoundError, ValueError, TemplateExecutionError, DeserializationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
