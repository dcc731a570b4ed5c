"""Invitation endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List
from uuid import UUID

from api.dependencies import get_current_user_id, get_invitation_service
from api.schemas import (
    ApiResponse,
    CreateInvitationRequest,
    MessageResponse,
    RespondInvitationRequest,
    ok,
)
from models import Invitation
from services import InvitationService

router = APIRouter()


@router.post("", response_model=ApiResponse[Invitation], status_code=201)
async def create_invitation(
    req: CreateInvitationRequest,
    user_id: str = Depends(get_current_user_id),
    invitations: InvitationService = Depends(get_invitation_service),
):
    invitation = await invitations.create_invitation(
        str(req.ttr_id), user_id, str(req.invitee_user_id), req.message
    )
    return ok(invitation)


@router.get("/me", response_model=ApiResponse[List[Invitation]])
async def my_invitations(
    kind: str = Query("received", alias="type"),
    user_id: str = Depends(get_current_user_id),
    invitations: InvitationService = Depends(get_invitation_service),
):
    """?type=received (default) or ?type=sent, newest first."""
    if kind not in ("received", "sent"):
        raise HTTPException(400, "type must be 'received' or 'sent'")
    return ok(await invitations.get_user_invitations(user_id, received=kind == "received"))


@router.get("/{invitation_id}", response_model=ApiResponse[Invitation])
async def get_invitation(
    invitation_id: UUID,
    _: str = Depends(get_current_user_id),
    invitations: InvitationService = Depends(get_invitation_service),
):
    return ok(await invitations.get_invitation(str(invitation_id)))


@router.put("/{invitation_id}/respond", response_model=ApiResponse[Invitation])
async def respond_to_invitation(
    invitation_id: UUID,
    req: RespondInvitationRequest,
    user_id: str = Depends(get_current_user_id),
    invitations: InvitationService = Depends(get_invitation_service),
):
    return ok(await invitations.respond_to_invitation(str(invitation_id), user_id, req.status))


@router.delete("/{invitation_id}", response_model=ApiResponse[MessageResponse])
async def cancel_invitation(
    invitation_id: UUID,
    user_id: str = Depends(get_current_user_id),
    invitations: InvitationService = Depends(get_invitation_service),
):
    await invitations.cancel_invitation(str(invitation_id), user_id)
    return ok(MessageResponse(message="Invitation canceled successfully"))
