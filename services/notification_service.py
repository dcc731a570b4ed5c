"""Notification sink: persists user notifications and reads them back."""

import logging
from typing import List, Optional

from models import Notification
from services.errors import ResourceNotFoundError
from services.interfaces import NotificationRepository


class NotificationService:
    """Stores notifications as rows (an outbox a delivery worker can drain)."""

    def __init__(
        self,
        notifications: NotificationRepository,
        logger: Optional[logging.Logger] = None,
    ):
        self._notifications = notifications
        self._logger = logger or logging.getLogger(__name__)

    async def notify(
        self,
        user_id: str,
        kind: str,
        title: str,
        body: str,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
    ) -> Notification:
        notification = await self._notifications.create_notification(
            Notification(
                user_id=user_id,
                type=kind,
                title=title,
                message=body,
                target_type=target_type,
                target_id=target_id,
            )
        )
        self._logger.info(
            "Notification %s queued for user %s (%s)", notification.id, user_id, kind
        )
        return notification

    async def list_notifications(
        self,
        user_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> List[Notification]:
        return await self._notifications.list_for_user(
            user_id, limit=limit, offset=offset, unread_only=unread_only
        )

    async def mark_read(self, notification_id: str, user_id: str) -> Notification:
        notification = await self._notifications.mark_read(notification_id, user_id)
        if notification is None:
            raise ResourceNotFoundError("notification not found")
        return notification

    async def mark_all_read(self, user_id: str) -> int:
        return await self._notifications.mark_all_read(user_id)
