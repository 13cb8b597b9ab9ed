"""Formatter protocol and the name -> formatter registry."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pg_console.core.models import QueryResult


@runtime_checkable
class Formatter(Protocol):
    """Renders a QueryResult as lines of text.

    ``caption`` is grid metadata such as "Page 2 of 3 (120 rows)"; machine
    formats ignore it.
    """

    def format(self, result: QueryResult, caption: str | None = None) -> Iterator[str]: ...


F = TypeVar("F", bound=type)


class FormatterRegistry:
    def __init__(self) -> None:
        self._classes: dict[str, type[Formatter]] = {}

    def register(self, name: str) -> Callable[[F], F]:
        """Class decorator adding a formatter under ``name``."""

        def decorator(cls: F) -> F:
            self._classes[name] = cls
            return cls

        return decorator

    def get(self, name: str, **options: object) -> Formatter:
        try:
            cls = self._classes[name]
        except KeyError:
            raise KeyError(
                f"Unknown format {name!r}. Available: {', '.join(self.available)}"
            ) from None
        return cls(**options)

    @property
    def available(self) -> list[str]:
        return sorted(self._classes)


registry = FormatterRegistry()
