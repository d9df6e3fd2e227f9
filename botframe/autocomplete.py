"""Autocomplete choices and conversion of callback results into async streams."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterable, AsyncIterator, Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass
class AutocompleteChoice(Generic[T]):
    """A single autocomplete suggestion: a displayed name and the value sent to the bot."""

    name: str
    value: T

    @classmethod
    def from_value(cls, value: T) -> AutocompleteChoice[T]:
        """Build a choice whose name is the string form of ``value``."""
        return cls(name=str(value), value=value)


async def _iterate(items: Iterable[Any]) -> AsyncIterator[Any]:
    for item in items:
        yield item


def into_stream(value: Iterable[Any] | AsyncIterable[Any]) -> AsyncIterator[Any]:
    """Turn an iterable or an async iterable into an async iterator."""
    if hasattr(value, "__aiter__"):
        return value.__aiter__()  # type: ignore[union-attr]
    if hasattr(value, "__iter__"):
        return _iterate(value)  # type: ignore[arg-type]
    raise TypeError(f"cannot stream a value of type {type(value).__name__}")