import itertools
import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Tuple, TypeVar

from procwatch.util.log_config import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")

_token_ids = itertools.count(1)


@dataclass(frozen=True)
class Subscription:
    """Token returned by ObserverList.subscribe, used to unsubscribe"""
    event: str
    token_id: int


class ObserverList(Generic[T]):
    """
    Ordered list of callbacks for one event.

    Subscribe/unsubscribe may happen from any thread. dispatch() iterates a
    snapshot of the list, so changes made during a dispatch apply from the
    next dispatch on.
    """

    def __init__(self, event: str):
        self.event = event
        self._lock = threading.Lock()
        self._callbacks: List[Tuple[Subscription, Callable[[T], Any]]] = []

    def subscribe(self, callback: Callable[[T], Any]) -> Subscription:
        token = Subscription(self.event, next(_token_ids))
        with self._lock:
            self._callbacks.append((token, callback))
        return token

    def unsubscribe(self, token: Subscription) -> bool:
        """Remove the callback behind token; False if it wasn't subscribed."""
        with self._lock:
            for i, (existing, _) in enumerate(self._callbacks):
                if existing == token:
                    del self._callbacks[i]
                    return True
        return False

    def dispatch(self, payload: T) -> int:
        """
        Invoke every callback in subscription order.

        Callback exceptions are logged and never reach the caller.

        Returns:
            Number of callbacks that completed without raising
        """
        with self._lock:
            snapshot = list(self._callbacks)

        delivered = 0
        for token, callback in snapshot:
            try:
                callback(payload)
                delivered += 1
            except Exception:
                logger.exception(f"Subscriber {token.token_id} of '{self.event}' failed for {payload!r}")
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)
