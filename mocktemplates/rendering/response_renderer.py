"""
Response rendering for matched expectations.
"""

from typing import List, Optional, Tuple

from ..config import ConfigLoader, Expectation
from ..http import HttpRequest, HttpResponseDTO
from ..template import MustacheTemplateEngine
from .matcher import ExpectationMatcher


class ResponseRenderer:
    """Finds the expectation for a request and renders its response template."""

    def __init__(self, config_loader: ConfigLoader, template_engine: MustacheTemplateEngine):
        self.config_loader = config_loader
        self.template_engine = template_engine

    def find_expectation(self, request: HttpRequest) -> Optional[Tuple[Expectation, HttpRequest]]:
        """
        Find the first expectation matching the request.

        Expectations are re-read on every call so edits to the config
        directory apply to the next request.

        Returns:
            (expectation, request with path parameters added), or None
        """
        matchers: List[ExpectationMatcher] = [
            ExpectationMatcher(expectation) for expectation in self.config_loader.load_expectations()
        ]
        for matcher in matchers:
            path_parameters = matcher.match(request)
            if path_parameters is not None:
                return matcher.expectation, request.with_path_parameters(path_parameters)
        return None

    def render_response(self, request: HttpRequest) -> Optional[HttpResponseDTO]:
        """
        Render the response for a request.

        Returns:
            The rendered response, or None if no expectation matches

        Raises:
            TemplateExecutionError: the response template failed to render
            DeserializationError: the rendered text is not a valid response
        """
        found = self.find_expectation(request)
        if found is None:
            return None

        expectation, matched_request = found
        return self.template_engine.execute_template(expectation.template, matched_request, HttpResponseDTO)
