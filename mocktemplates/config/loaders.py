"""
Expectation and template loaders.

An expectation file (configs/expectations/<name>.json) pairs a request
matcher with a response template:

    {
      "httpRequest": {"method": "POST", "path": "/orders/{orderId}"},
      "httpResponseTemplate": {
        "templateType": "MUSTACHE",
        "templateFile": "order_created.mustache"
      }
    }

The template is given inline as "template" (a string, or a JSON value that is
serialized to text) or as a "templateFile" relative to configs/templates.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

SUPPORTED_TEMPLATE_TYPES = ("MUSTACHE",)


@dataclass(frozen=True)
class Expectation:
    """A request matcher and the response template to render for it."""

    name: str
    path: str
    template: str
    method: Optional[str] = None
    template_type: str = "MUSTACHE"


class ConfigLoader:
    """Loads expectation and template files."""

    def __init__(self, config_dir: str = "configs"):
        self.config_dir = Path(config_dir)
        self.expectations_dir = self.config_dir / "expectations"
        self.templates_dir = self.config_dir / "templates"

    def load_template(self, template_file: str) -> str:
        """Load a template file by name."""
        path = self.templates_dir / template_file
        if not path.exists():
            raise FileNotFoundError(f"Template not found: {template_file}")

        with open(path, encoding="utf-8") as f:
            return f.read()

    def load_expectation(self, name: str) -> Expectation:
        """Load an expectation configuration by name."""
        expectation_file = self.expectations_dir / f"{name}.json"
        if not expectation_file.exists():
            raise FileNotFoundError(f"Expectation config not found: {name}")

        with open(expectation_file, encoding="utf-8") as f:
            return self.parse_expectation(name, json.load(f))

    def load_expectations(self) -> List[Expectation]:
        """Load all expectations, ordered by file name."""
        if not self.expectations_dir.exists():
            return []
        return [
            self.load_expectation(expectation_file.stem)
            for expectation_file in sorted(self.expectations_dir.glob("*.json"))
        ]

    def parse_expectation(self, name: str, config: Dict[str, Any]) -> Expectation:
        """
        Validate a raw expectation config.

        Raises:
            ValueError: required fields are missing or the template type is unsupported
        """
        request_matcher = config.get("httpRequest") or {}
        path = request_matcher.get("path")
        if not path or not isinstance(path, str):
            raise ValueError(f"Expectation '{name}' missing required 'httpRequest.path' field")

        response_template = config.get("httpResponseTemplate")
        if not isinstance(response_template, dict):
            raise ValueError(f"Expectation '{name}' missing required 'httpResponseTemplate' field")

        template_type = str(response_template.get("templateType", "MUSTACHE")).upper()
        if template_type not in SUPPORTED_TEMPLATE_TYPES:
            raise ValueError(f"Expectation '{name}' has unsupported templateType '{template_type}'")

        if "template" in response_template:
            template = response_template["template"]
            if not isinstance(template, str):
                template = json.dumps(template, indent=2)
        elif "templateFile" in response_template:
            template = self.load_template(response_template["templateFile"])
        else:
            raise ValueError(f"Expectation '{name}' has neither 'template' nor 'templateFile'")

        return Expectation(
            name=name,
            path=path,
            template=template,
            method=request_matcher.get("method"),
            template_type=template_type,
        )
