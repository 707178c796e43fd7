import threading
from typing import Type, Callable, List, Dict, Any, Optional
from crfbatch.domain.events import Event

class EventBus:
    """Synchronous pub/sub; safe to publish from worker threads.

    Callbacks run on the publishing thread, one publish at a time.
    """

    def __init__(self):
        self._subscribers: Dict[Type[Event], List[Callable[[Any], None]]] = {}
        self._lock = threading.RLock()

    def subscribe(self, event_type: Type[Event], callback: Optional[Callable[[Any], None]] = None):
        """Subscribes a callback to an event type. Can be used as a decorator."""
        if callback is None:
            def decorator(func: Callable[[Any], None]):
                self.subscribe(event_type, func)
                return func
            return decorator

        with self._lock:
            self._subscribers.setdefault(event_type, []).append(callback)

    def publish(self, event: Event):
        with self._lock:
            for callback in list(self._subscribers.get(type(event), [])):
                callback(event)
