"""Tee time reservation endpoints."""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from uuid import UUID

from api.dependencies import get_current_user_id, get_ttr_service
from api.schemas import (
    AddCoCaptainRequest,
    ApiResponse,
    CreateTTRRequest,
    MessageResponse,
    UpdatePlayerStatusRequest,
    UpdateTTRRequest,
    ok,
)
from models import Player, TTR
from services import TTRService

router = APIRouter()


@router.post("", response_model=ApiResponse[TTR], status_code=201)
async def create_ttr(
    req: CreateTTRRequest,
    user_id: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    ttr = await ttrs.create_ttr(
        user_id,
        req.course_name,
        req.tee_date,
        req.tee_time,
        req.max_players,
        course_location=req.course_location,
        notes=req.notes,
    )
    return ok(ttr)


@router.get("", response_model=ApiResponse[List[TTR]])
async def search_ttrs(
    status: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    _: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    """List TTRs by tee date and time, soonest first."""
    return ok(await ttrs.search_ttrs(limit=limit, offset=offset, status=status))


@router.get("/me", response_model=ApiResponse[List[TTR]])
async def my_ttrs(
    upcoming: bool = Query(True),
    user_id: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    """TTRs the caller captains, co-captains or plays in."""
    return ok(await ttrs.list_user_ttrs(user_id, upcoming=upcoming))


@router.get("/{ttr_id}", response_model=ApiResponse[TTR])
async def get_ttr(
    ttr_id: UUID,
    _: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    return ok(await ttrs.get_ttr(str(ttr_id)))


@router.put("/{ttr_id}", response_model=ApiResponse[TTR])
async def update_ttr(
    ttr_id: UUID,
    req: UpdateTTRRequest,
    user_id: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    """Apply only the fields present in the request body."""
    fields = req.model_dump(exclude_unset=True)
    return ok(await ttrs.update_ttr(str(ttr_id), user_id, **fields))


@router.delete("/{ttr_id}", response_model=ApiResponse[MessageResponse])
async def delete_ttr(
    ttr_id: UUID,
    user_id: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    await ttrs.delete_ttr(str(ttr_id), user_id)
    return ok(MessageResponse(message="TTR deleted successfully"))


# ================================================================
# Co-captains
# ================================================================

@router.post("/{ttr_id}/co-captains", response_model=ApiResponse[MessageResponse], status_code=201)
async def add_co_captain(
    ttr_id: UUID,
    req: AddCoCaptainRequest,
    user_id: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    await ttrs.add_co_captain(str(ttr_id), user_id, str(req.user_id))
    return ok(MessageResponse(message="Co-captain added successfully"))


@router.delete("/{ttr_id}/co-captains/{target_user_id}", response_model=ApiResponse[MessageResponse])
async def remove_co_captain(
    ttr_id: UUID,
    target_user_id: UUID,
    user_id: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    await ttrs.remove_co_captain(str(ttr_id), user_id, str(target_user_id))
    return ok(MessageResponse(message="Co-captain removed successfully"))


# ================================================================
# Roster
# ================================================================

@router.post("/{ttr_id}/join", response_model=ApiResponse[MessageResponse])
async def join_ttr(
    ttr_id: UUID,
    user_id: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    await ttrs.join_ttr(str(ttr_id), user_id)
    return ok(MessageResponse(message="Joined TTR successfully"))


@router.post("/{ttr_id}/leave", response_model=ApiResponse[MessageResponse])
async def leave_ttr(
    ttr_id: UUID,
    user_id: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    await ttrs.leave_ttr(str(ttr_id), user_id)
    return ok(MessageResponse(message="Left TTR successfully"))


@router.get("/{ttr_id}/players", response_model=ApiResponse[List[Player]])
async def get_players(
    ttr_id: UUID,
    _: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    return ok(await ttrs.get_players(str(ttr_id)))


@router.put("/{ttr_id}/players/{target_user_id}", response_model=ApiResponse[Player])
async def update_player_status(
    ttr_id: UUID,
    target_user_id: UUID,
    req: UpdatePlayerStatusRequest,
    user_id: str = Depends(get_current_user_id),
    ttrs: TTRService = Depends(get_ttr_service),
):
    player = await ttrs.update_player_status(
        str(ttr_id), user_id, str(target_user_id), req.status
    )
    return ok(player)
