"""
Mustache template execution.

Templates use Mustache syntax (see https://mustache.github.io/mustache.5.html)
rendered with chevron, with these fixed semantics:

- "" and 0 are falsy in sections
- a section for an unknown name is skipped, not an error
- an unknown variable renders as ""

Extension functions are called as sections, for example:

    {{#jsonPath}}$.order.id{{/jsonPath}}
    {{#xPath}}/order/id/text(){{/xPath}}

Partials are never loaded from disk; `{{> name}}` renders as "".

Templates are tokenized on every call. chevron keeps the text of lambda
sections in a process-wide token cache; the engine clears it once it holds
more than FRAGMENT_CACHE_LIMIT entries.
"""

import json
from typing import Any, Optional, Type, TypeVar

import chevron
from chevron import renderer as chevron_renderer

from ..diagnostics import TRACE, DiagnosticsSink, LogEntry, LogMessageType
from ..errors import TemplateExecutionError
from ..http import HttpRequest
from ..serialization import TemplateOutputDeserializer
from .context import REQUEST_BINDING, BindingMap, ContextBuilder

T = TypeVar("T")

TEMPLATE_GENERATED_MESSAGE_FORMAT = "generated output:{}from template:{}for request:{}"

FRAGMENT_CACHE_LIMIT = 1000


def trim_fragment_cache(limit: Optional[int] = None) -> None:
    """Clear chevron's lambda fragment cache when it grows past `limit`."""
    if limit is None:
        limit = FRAGMENT_CACHE_LIMIT
    if len(chevron_renderer.g_token_cache) > limit:
        chevron_renderer.g_token_cache.clear()


def try_parse_json(text: str) -> Optional[Any]:
    """Parse text as JSON, or None if it is not JSON."""
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


class MustacheTemplateEngine:
    """Renders Mustache templates against request data."""

    def __init__(
        self,
        sink: Optional[DiagnosticsSink] = None,
        context_builder: Optional[ContextBuilder] = None,
        deserializer: Optional[TemplateOutputDeserializer] = None,
    ):
        self.sink = sink or DiagnosticsSink()
        self.context_builder = context_builder or ContextBuilder(self.sink)
        self.deserializer = deserializer or TemplateOutputDeserializer(self.sink)

    def render(self, template: str, bindings: BindingMap) -> str:
        """
        Compile and execute a template.

        Args:
            template: Mustache template text
            bindings: Names visible to the template (see ContextBuilder)

        Returns:
            Rendered text

        Raises:
            TemplateExecutionError: the template is malformed or a function failed
        """
        request_view = bindings.get(REQUEST_BINDING)
        request = getattr(request_view, "request", request_view)
        try:
            rendered = chevron.render(template, bindings, partials_path=None, warn=False)
        except Exception as e:
            raise TemplateExecutionError(template, request, e) from e
        finally:
            trim_fragment_cache()

        self._log_generated(rendered, template, request)
        return rendered

    def execute_template(self, template: str, request: HttpRequest, dto_class: Type[T]) -> T:
        """
        Render a template for a request and convert the output into dto_class.

        Raises:
            TemplateExecutionError: rendering failed
            DeserializationError: the output is not a valid dto_class (not wrapped)
        """
        rendered = self.render(template, self.context_builder.build(request))
        return self.deserializer.deserialize(request, rendered, dto_class)

    def _log_generated(self, rendered: str, template: str, request: Any) -> None:
        if not self.sink.is_enabled(TRACE):
            return
        generated = try_parse_json(rendered)
        if generated is None:
            self.sink.log_event(
                LogEntry(
                    level=TRACE,
                    http_request=request,
                    message_format="exception deserialising generated content:{}into json node for request:{}",
                    arguments=(rendered, request),
                )
            )
            generated = rendered
        else:
            generated = json.dumps(generated, indent=2)
        self.sink.log_event(
            LogEntry(
                level=TRACE,
                type=LogMessageType.TEMPLATE_GENERATED,
                http_request=request,
                message_format=TEMPLATE_GENERATED_MESSAGE_FORMAT,
                arguments=(generated, template, request),
            )
        )
