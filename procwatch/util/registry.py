"""
Explicit plugin registry.

Plugin modules register their classes under a stable name when they are
imported; callers discover the registered names and instantiate by name.
"""
from typing import Any, Callable, Dict, Generic, TypeVar

T = TypeVar("T")


class Registry(Generic[T]):
    """Mapping from a stable string key to a factory producing T."""

    def __init__(self, kind: str):
        self.kind = kind
        self._factories: Dict[str, Callable[..., T]] = {}

    def register(self, key: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
        """
        Class decorator registering a factory under key.

        Registering the same factory twice is a no-op; registering a different
        factory under a taken key raises ValueError.
        """
        def decorator(factory: Callable[..., T]) -> Callable[..., T]:
            existing = self._factories.get(key)
            if existing is not None and existing is not factory:
                raise ValueError(f"{self.kind} '{key}' is already registered to {existing!r}")
            self._factories[key] = factory
            return factory

        return decorator

    def discover(self) -> Dict[str, Callable[..., T]]:
        """Return a copy of all registered factories, keyed by name."""
        return dict(self._factories)

    def instantiate(self, key: str, **kwargs: Any) -> T:
        try:
            factory = self._factories[key]
        except KeyError:
            known = ", ".join(sorted(self._factories)) or "none"
            raise KeyError(f"Unknown {self.kind} '{key}' (known: {known})") from None
        return factory(**kwargs)

    def __contains__(self, key: object) -> bool:
        return key in self._factories

    def __len__(self) -> int:
        return len(self._factories)
