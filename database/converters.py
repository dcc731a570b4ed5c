"""Conversion between asyncpg database rows and Pydantic domain models.

Centralizes all mapping logic between the relational schema and the
nested Pydantic models (a TTR row plus its co-captain and player rows).
"""

from typing import Optional
from uuid import UUID

from models import (
    CoCaptain,
    Invitation,
    Notification,
    Player,
    RefreshToken,
    TTR,
    User,
)


def _str_id(value) -> Optional[str]:
    return str(value) if value is not None else None


# ================================================================
# Row -> Model (reads)
# ================================================================

def user_from_row(row) -> User:
    """users row -> User model."""
    return User(
        id=str(row["id"]),
        email=row["email"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        handicap=float(row["handicap"]) if row["handicap"] is not None else None,
        phone=row["phone"],
        avatar_url=row["avatar_url"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        password_hash=row["password_hash"],
    )


def co_captain_from_row(row) -> CoCaptain:
    """ttr_co_captains row -> CoCaptain model."""
    return CoCaptain(
        ttr_id=str(row["ttr_id"]),
        user_id=str(row["user_id"]),
        assigned_at=row["assigned_at"],
    )


def player_from_row(row) -> Player:
    """ttr_players row -> Player model."""
    return Player(
        ttr_id=str(row["ttr_id"]),
        user_id=str(row["user_id"]),
        status=row["status"],
        joined_at=row["joined_at"],
    )


def ttr_from_rows(ttr_row, co_captain_rows: list, player_rows: list) -> TTR:
    """Assemble a TTR from its row plus co-captain and player rows."""
    players = sorted(
        [player_from_row(r) for r in player_rows],
        key=lambda p: (p.joined_at is None, p.joined_at),
    )
    return TTR(
        id=str(ttr_row["id"]),
        course_name=ttr_row["course_name"],
        course_location=ttr_row["course_location"],
        tee_date=ttr_row["tee_date"],
        tee_time=ttr_row["tee_time"],
        max_players=ttr_row["max_players"],
        created_by_user_id=str(ttr_row["created_by_user_id"]),
        captain_user_id=str(ttr_row["captain_user_id"]),
        status=ttr_row["status"],
        notes=ttr_row["notes"],
        created_at=ttr_row["created_at"],
        updated_at=ttr_row["updated_at"],
        co_captains=[co_captain_from_row(r) for r in co_captain_rows],
        players=players,
    )


def invitation_from_row(row) -> Invitation:
    """invitations row -> Invitation model."""
    return Invitation(
        id=str(row["id"]),
        ttr_id=str(row["ttr_id"]),
        inviter_user_id=str(row["inviter_user_id"]),
        invitee_user_id=str(row["invitee_user_id"]),
        status=row["status"],
        message=row["message"],
        created_at=row["created_at"],
        responded_at=row["responded_at"],
    )


def notification_from_row(row) -> Notification:
    """notifications row -> Notification model."""
    return Notification(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        type=row["type"],
        title=row["title"],
        message=row["message"],
        target_type=row["target_type"],
        target_id=_str_id(row["target_id"]),
        is_read=row["is_read"],
        created_at=row["created_at"],
        read_at=row["read_at"],
    )


def refresh_token_from_row(row) -> RefreshToken:
    """refresh_tokens row -> RefreshToken model."""
    return RefreshToken(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        token_hash=row["token_hash"],
        expires_at=row["expires_at"],
        revoked=row["revoked"],
        created_at=row["created_at"],
    )


# ================================================================
# Model -> Row dict (writes)
# ================================================================

def user_to_row(user: User) -> dict:
    """User -> dict for users INSERT."""
    return {
        "email": user.email,
        "password_hash": user.password_hash,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "handicap": user.handicap,
        "phone": user.phone,
        "avatar_url": user.avatar_url,
    }


def ttr_to_row(ttr: TTR) -> dict:
    """TTR -> dict for ttrs INSERT."""
    return {
        "course_name": ttr.course_name,
        "course_location": ttr.course_location,
        "tee_date": ttr.tee_date,
        "tee_time": ttr.tee_time,
        "max_players": ttr.max_players,
        "created_by_user_id": UUID(ttr.created_by_user_id),
        "captain_user_id": UUID(ttr.captain_user_id),
        "status": ttr.status.value,
        "notes": ttr.notes,
    }


def invitation_to_row(invitation: Invitation) -> dict:
    """Invitation -> dict for invitations INSERT."""
    return {
        "ttr_id": UUID(invitation.ttr_id),
        "inviter_user_id": UUID(invitation.inviter_user_id),
        "invitee_user_id": UUID(invitation.invitee_user_id),
        "status": invitation.status.value,
        "message": invitation.message,
    }


def notification_to_row(notification: Notification) -> dict:
    """Notification -> dict for notifications INSERT."""
    return {
        "user_id": UUID(notification.user_id),
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "target_type": notification.target_type,
        "target_id": UUID(notification.target_id) if notification.target_id else None,
    }


def group_rows_by(rows: list, key: str) -> dict:
    """Bucket child rows by a parent id column (used to batch-load rosters)."""
    grouped: dict = {}
    for r in rows:
        grouped.setdefault(r[key], []).append(r)
    return grouped
