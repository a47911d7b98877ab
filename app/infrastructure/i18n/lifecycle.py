"""Host lifecycle signals.

The host application calls ``notify_foreground()`` when it becomes active
again; subscribed callbacks (typically ``Translator.fetch``) are invoked in
registration order.
"""

from threading import Lock
from typing import Callable, List

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class LifecycleObserver:
    """Registry of zero-argument foreground callbacks."""

    def __init__(self):
        self._callbacks: List[Callable[[], object]] = []
        self._lock = Lock()

    def subscribe(self, callback: Callable[[], object]) -> Callable[[], None]:
        """Register ``callback``; returns a function that removes it again."""
        with self._lock:
            self._callbacks.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unsubscribe

    def notify_foreground(self) -> None:
        """Invoke every subscribed callback, logging and skipping failures."""
        with self._lock:
            callbacks = list(self._callbacks)

        logger.debug("lifecycle_foreground", callback_count=len(callbacks))
        for callback in callbacks:
            try:
                callback()
            except Exception as e:  # pylint: disable=broad-except
                logger.error(
                    "lifecycle_callback_failed",
                    callback=getattr(callback, "__name__", "unknown"),
                    error=str(e),
                )
