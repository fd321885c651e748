"""Per-component post-processing hooks."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Union

from url_canon.errors import InvalidArgumentError

# Fixed set of extension points, in URL order.
COMPONENTS: tuple[str, ...] = (
    "scheme",
    "user",
    "password",
    "host",
    "port",
    "path",
    "query",
    "fragment",
)

Handler = Callable[[Any, Any], Any]
HandlerOverrides = Union["HandlerRegistry", Mapping[str, Union[Handler, None]], None]


class HandlerRegistry:
    """Optional ``(normalized, original) -> value`` callback per URL component.

    Components without a handler pass their normalised value through
    unchanged. A ``None`` normalised value is never handed to a handler: the
    component is already absent and stays absent.

    Args:
        handlers: Optional initial mapping of component name to callable.
    """

    def __init__(self, handlers: Mapping[str, Handler | None] | None = None) -> None:
        self._handlers: dict[str, Handler] = {}
        for component, fn in (handlers or {}).items():
            if fn is not None:
                self.register(component, fn)

    def register(self, component: str, fn: Handler) -> None:
        """Install *fn* as the handler for *component*, replacing any previous one.

        Raises:
            InvalidArgumentError: If *component* is not a URL component name
                or *fn* is not callable.
        """
        if component not in COMPONENTS:
            raise InvalidArgumentError(
                f"Unknown URL component {component!r}; expected one of {', '.join(COMPONENTS)}."
            )
        if not callable(fn):
            raise InvalidArgumentError(f"Handler for {component!r} must be callable.")
        self._handlers[component] = fn

    def invoke(self, component: str, normalized: Any, original: Any) -> Any:  # noqa: ANN401
        """Run the handler for *component* over *normalized*.

        Args:
            component:  URL component name.
            normalized: Value produced by the built-in normaliser.
            original:   Value as it came out of the parser.

        Returns:
            ``None`` when *normalized* is ``None``; otherwise the handler's
            result, or *normalized* itself when no handler is registered.
        """
        if normalized is None:
            return None
        handler = self._handlers.get(component)
        if handler is None:
            return normalized
        return handler(normalized, original)

    def merged(self, overrides: HandlerOverrides = None) -> HandlerRegistry:
        """Return a new registry with *overrides* layered over this one."""
        combined = HandlerRegistry(self._handlers)
        if isinstance(overrides, HandlerRegistry):
            overrides = overrides._handlers
        for component, fn in (overrides or {}).items():
            if fn is not None:
                combined.register(component, fn)
        return combined

    def registered(self) -> tuple[str, ...]:
        """Component names that currently have a handler, in URL order."""
        return tuple(c for c in COMPONENTS if c in self._handlers)

    def __contains__(self, component: object) -> bool:
        return component in self._handlers

    def __repr__(self) -> str:
        return f"HandlerRegistry({list(self.registered())!r})"
