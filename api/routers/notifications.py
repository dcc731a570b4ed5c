"""Notification inbox endpoints."""

from fastapi import APIRouter, Depends, Query
from typing import List
from uuid import UUID

from api.dependencies import get_current_user_id, get_notification_service
from api.schemas import ApiResponse, MarkAllReadResponse, ok
from models import Notification
from services import NotificationService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[Notification]])
async def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    notifications: NotificationService = Depends(get_notification_service),
):
    return ok(await notifications.list_notifications(
        user_id, limit=limit, offset=offset, unread_only=unread_only
    ))


@router.put("/read-all", response_model=ApiResponse[MarkAllReadResponse])
async def mark_all_read(
    user_id: str = Depends(get_current_user_id),
    notifications: NotificationService = Depends(get_notification_service),
):
    return ok(MarkAllReadResponse(updated=await notifications.mark_all_read(user_id)))


@router.put("/{notification_id}/read", response_model=ApiResponse[Notification])
async def mark_read(
    notification_id: UUID,
    user_id: str = Depends(get_current_user_id),
    notifications: NotificationService = Depends(get_notification_service),
):
    return ok(await notifications.mark_read(str(notification_id), user_id))
