"""
Request matching for expectations.

Expectation paths may contain {name} segments, which match one path segment
and are captured as path parameters:

    /orders/{orderId}/items/{itemId}  matches  /orders/7/items/3
    -> {"orderId": "7", "itemId": "3"}
"""

import re
from typing import Dict, Optional, Pattern

from ..config import Expectation
from ..http import HttpRequest


class ExpectationMatcher:
    """Matches requests against one expectation's method and path."""

    # Pattern to match {name} path parameter placeholders
    PARAM_PATTERN = re.compile(r'\{(\w+)\}')

    def __init__(self, expectation: Expectation):
        self.expectation = expectation
        self.path_pattern = self.compile_path(expectation.path)

    @classmethod
    def compile_path(cls, path: str) -> Pattern[str]:
        """Turn an expectation path into a regex with one named group per parameter."""
        pattern = []
        position = 0
        for match in cls.PARAM_PATTERN.finditer(path):
            pattern.append(re.escape(path[position:match.start()]))
            pattern.append(f"(?P<{match.group(1)}>[^/]+)")
            position = match.end()
        pattern.append(re.escape(path[position:]))
        return re.compile("".join(pattern))

    def match(self, request: HttpRequest) -> Optional[Dict[str, str]]:
        """
        Returns:
            Captured path parameters if the request matches, otherwise None
        """
        method = self.expectation.method
        if method and method.upper() != request.method.upper():
            return None

        path_match = self.path_pattern.fullmatch(request.path)
        if path_match is None:
            return None
        return path_match.groupdict()
