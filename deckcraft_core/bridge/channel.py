"""Fire-and-forget notification channel."""

from collections.abc import Callable

import structlog

from deckcraft_core.schemas.notifications import Notification, NotificationType

logger = structlog.get_logger()

Subscriber = Callable[[Notification], None]


class NotificationChannel:
    """Fans notifications out to subscribers.

    Emitting never fails: a subscriber that raises is logged and skipped.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber and return a function that removes it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def emit(self, notification: Notification) -> None:
        logger.info(
            "notification",
            kind=notification.type.value,
            message=notification.message,
        )
        for subscriber in list(self._subscribers):
            try:
                subscriber(notification)
            except Exception:
                logger.exception("notification_subscriber_failed")

    __call__ = emit

    def info(self, message: str) -> None:
        self.emit(Notification(type=NotificationType.INFO, message=message))

    def success(self, message: str) -> None:
        self.emit(Notification(type=NotificationType.SUCCESS, message=message))

    def error(self, message: str) -> None:
        self.emit(Notification(type=NotificationType.ERROR, message=message))
