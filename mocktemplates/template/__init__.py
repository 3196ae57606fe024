"""Template rendering and the functions available inside templates."""

from .context import ContextBuilder
from .engine import MustacheTemplateEngine, try_parse_json
from .functions import BUILT_IN_FUNCTIONS, BuiltInFunction, ExtensionFunction, ExtensionKind, QueryFunction
from .queries import JSONPathEngine, XPathEngine, evaluate_json_path, evaluate_xpath

__all__ = [
    "ContextBuilder",
    "MustacheTemplateEngine",
    "try_parse_json",
    "BUILT_IN_FUNCTIONS",
    "BuiltInFunction",
    "ExtensionFunction",
    "ExtensionKind",
    "QueryFunction",
    "JSONPathEngine",
    "XPathEngine",
    "evaluate_json_path",
    "evaluate_xpath",
]
