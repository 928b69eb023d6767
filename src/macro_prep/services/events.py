"""Collection change notifications and live derived values."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

COLLECTIONS = ("user", "ingredients", "fridge", "recipes", "logs")

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[str], None]


@dataclass
class ChangeFeed:
    """Per-collection publish/subscribe hub.

    Publishers call `publish` only after a write has been committed, so
    listeners never observe a partially applied write.
    """

    _listeners: dict[str, list[Listener]] = field(default_factory=dict)

    def subscribe(
        self, collections: Iterable[str], listener: Listener
    ) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        names = list(collections)
        for name in names:
            self._listeners.setdefault(name, []).append(listener)

        def unsubscribe() -> None:
            for name in names:
                listeners = self._listeners.get(name, [])
                if listener in listeners:
                    listeners.remove(listener)

        return unsubscribe

    def publish(self, collections: Iterable[str]) -> None:
        """Notify each listener once per changed collection."""
        for name in sorted(set(collections)):
            for listener in list(self._listeners.get(name, [])):
                listener(name)


@dataclass
class LiveQuery(Generic[T]):
    """A derived value recomputed from scratch whenever its inputs change."""

    compute: Callable[[], T]
    _value: T | None = None
    _stale: bool = True
    _unsubscribe: Callable[[], None] | None = None

    @classmethod
    def bind(
        cls, feed: ChangeFeed, collections: Iterable[str], compute: Callable[[], T]
    ) -> "LiveQuery[T]":
        """Create a live query that invalidates on collection changes."""
        query = cls(compute=compute)
        query._unsubscribe = feed.subscribe(collections, query._invalidate)
        return query

    @property
    def value(self) -> T:
        """Return the current value, recomputing it if inputs changed."""
        if self._stale:
            self._value = self.compute()
            self._stale = False
        return self._value  # type: ignore[return-value]

    def close(self) -> None:
        """Stop listening for changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _invalidate(self, collection: str) -> None:
        _logger.debug("Live query invalidated by %s", collection)
        self._stale = True
