"""Invitation workflow: invite, respond, cancel, and list invitations."""

import logging
from typing import List, Optional

from database.exceptions import CapacityError, DuplicateError, NotFoundError, StaleStateError
from models import RESPONSE_STATUSES, Invitation, InvitationStatus
from services.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    InvalidOperationError,
    PermissionDeniedError,
    ResourceNotFoundError,
    RosterFullError,
)
from services.interfaces import InvitationRepository, TTRRepository, UserRepository
from services.notification_service import NotificationService


class InvitationService:
    """Business rules for invitations.

    PENDING is the only state that accepts a transition; YES, NO, MAYBE and
    CANCELED are terminal.
    """

    def __init__(
        self,
        invitations: InvitationRepository,
        ttrs: TTRRepository,
        users: UserRepository,
        notifications: NotificationService,
        logger: Optional[logging.Logger] = None,
    ):
        self._invitations = invitations
        self._ttrs = ttrs
        self._users = users
        self._notifications = notifications
        self._logger = logger or logging.getLogger(__name__)

    async def _require_invitation(self, invitation_id: str) -> Invitation:
        invitation = await self._invitations.get_invitation(invitation_id)
        if invitation is None:
            raise ResourceNotFoundError("invitation not found")
        return invitation

    # ================================================================
    # Create
    # ================================================================

    async def create_invitation(
        self,
        ttr_id: str,
        inviter_id: str,
        invitee_id: str,
        message: Optional[str] = None,
    ) -> Invitation:
        """Invite a user to a TTR. Checks run in order and the first failure wins."""
        ttr = await self._ttrs.get_ttr(ttr_id)
        if ttr is None:
            raise ResourceNotFoundError("TTR not found")
        if not ttr.can_manage(inviter_id):
            raise PermissionDeniedError(
                "unauthorized: only captain or co-captain can send invitations"
            )
        if await self._users.get_user(invitee_id) is None:
            raise ResourceNotFoundError("invitee user not found")
        if ttr.is_full():
            raise RosterFullError("TTR is full")
        if ttr.has_player(invitee_id):
            raise AlreadyExistsError("invitee is already a player in this TTR")
        if await self._invitations.find_pending(ttr_id, invitee_id) is not None:
            raise AlreadyExistsError("pending invitation already exists for this user")

        try:
            invitation = await self._invitations.create_invitation(
                Invitation(
                    ttr_id=ttr_id,
                    inviter_user_id=inviter_id,
                    invitee_user_id=invitee_id,
                    message=message,
                )
            )
        except DuplicateError as e:
            raise AlreadyExistsError("pending invitation already exists for this user") from e

        self._logger.info(
            "Invitation %s sent for TTR %s: %s -> %s", invitation.id, ttr_id, inviter_id, invitee_id
        )

        try:
            await self._notifications.notify(
                invitee_id,
                "invitation_received",
                "New TTR Invitation",
                f"You have been invited to join a tee time at {ttr.course_name}",
                target_type="invitation",
                target_id=invitation.id,
            )
        except Exception:
            self._logger.exception("Failed to create notification for invitation %s", invitation.id)

        return invitation

    # ================================================================
    # Respond / cancel
    # ================================================================

    async def respond_to_invitation(
        self, invitation_id: str, actor_id: str, status: str
    ) -> Invitation:
        """Answer YES, NO or MAYBE. YES adds the invitee to the roster atomically."""
        try:
            new_status = InvitationStatus(status)
        except ValueError as e:
            raise InvalidArgumentError("invalid invitation status") from e
        if new_status not in RESPONSE_STATUSES:
            raise InvalidArgumentError("invalid invitation status")

        invitation = await self._require_invitation(invitation_id)
        if invitation.invitee_user_id != actor_id:
            raise PermissionDeniedError(
                "unauthorized: you can only respond to your own invitations"
            )
        if not invitation.is_pending():
            raise InvalidOperationError("invitation has already been responded to")

        if new_status == InvitationStatus.YES:
            try:
                updated = await self._invitations.accept(
                    invitation_id, invitation.ttr_id, actor_id
                )
            except NotFoundError as e:
                raise ResourceNotFoundError("TTR not found") from e
            except CapacityError as e:
                raise RosterFullError("TTR is full, cannot accept invitation") from e
            except StaleStateError as e:
                raise InvalidOperationError("invitation has already been responded to") from e
        else:
            updated = await self._invitations.update_status(invitation_id, new_status)
            if updated is None:
                raise InvalidOperationError("invitation has already been responded to")

        self._logger.info(
            "Invitation %s answered %s by %s", invitation_id, new_status.value, actor_id
        )
        return updated

    async def cancel_invitation(self, invitation_id: str, actor_id: str) -> Invitation:
        invitation = await self._require_invitation(invitation_id)
        if invitation.inviter_user_id != actor_id:
            raise PermissionDeniedError(
                "unauthorized: only the inviter can cancel the invitation"
            )
        if not invitation.is_pending():
            raise InvalidOperationError("only pending invitations can be canceled")

        updated = await self._invitations.update_status(
            invitation_id, InvitationStatus.CANCELED
        )
        if updated is None:
            raise InvalidOperationError("only pending invitations can be canceled")
        self._logger.info("Invitation %s canceled by %s", invitation_id, actor_id)
        return updated

    # ================================================================
    # Read
    # ================================================================

    async def get_invitation(self, invitation_id: str) -> Invitation:
        return await self._require_invitation(invitation_id)

    async def get_user_invitations(
        self, user_id: str, *, received: bool = True
    ) -> List[Invitation]:
        """Received (as invitee) or sent (as inviter), newest first."""
        if received:
            return await self._invitations.list_received(user_id)
        return await self._invitations.list_sent(user_id)
