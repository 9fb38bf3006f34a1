import logging
from datetime import datetime, timedelta
from typing import Callable

import config
from enums.notification_kind import NotificationKind
from enums.store_entity import StoreEntity
from exceptions import StorefrontException
from models.notification import NotificationDTO
from utils.error_handler import handle_service_error, handle_unexpected_error
from utils.localizator import Localizator

logger = logging.getLogger(__name__)

NotificationListener = Callable[[NotificationDTO], None]


class NotificationService:
    """
    Fire-and-forget user feedback sink.

    Holds the most recent notification until it expires and forwards every
    notification to the registered listeners (a toast renderer, a test
    recorder, ...). Listener failures are logged and never reach the caller.
    """

    def __init__(self, ttl_seconds: float | None = None, clock: Callable[[], datetime] = datetime.now):
        self.ttl = timedelta(seconds=ttl_seconds if ttl_seconds is not None else config.NOTIFICATION_TTL_SECONDS)
        self._clock = clock
        self._current: NotificationDTO | None = None
        self._listeners: list[NotificationListener] = []
        self.history: list[NotificationDTO] = []

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def notify(self, message: str, kind: NotificationKind = NotificationKind.INFO) -> NotificationDTO:
        now = self._clock()
        notification = NotificationDTO(message=message, kind=kind, created_at=now, expires_at=now + self.ttl)
        self._current = notification
        self.history.append(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.error(f"Notification listener failed: {e}")
        return notification

    def current(self) -> NotificationDTO | None:
        """The notification still on screen, or None once it has expired."""
        if self._current is not None and self._clock() >= self._current.expires_at:
            self._current = None
        return self._current

    def dismiss(self) -> None:
        self._current = None

    def localized(self, entity: StoreEntity, key: str, kind: NotificationKind = NotificationKind.SUCCESS,
                  **format_args) -> NotificationDTO:
        return self.notify(Localizator.get_text(entity, key).format(**format_args), kind)

    def error(self, exception: StorefrontException, entity: StoreEntity = StoreEntity.COMMON) -> NotificationDTO:
        return self.notify(handle_service_error(exception, entity), NotificationKind.ERROR)

    def unexpected(self, exception: Exception, entity: StoreEntity = StoreEntity.COMMON) -> NotificationDTO:
        return self.notify(handle_unexpected_error(exception, entity), NotificationKind.ERROR)
