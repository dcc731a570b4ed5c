import pytest
from datetime import date, time

from models import PlayerStatus, TTRStatus
from services.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    InvalidOperationError,
    PermissionDeniedError,
    ResourceNotFoundError,
    RosterFullError,
)


# ================================================================
# create / get / delete
# ================================================================

@pytest.mark.asyncio
async def test_create_ttr_makes_actor_captain_and_player(ttr_service, users, tee_slot):
    captain = users.add("Alice", "Able")
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)

    assert ttr.id
    assert ttr.captain_user_id == captain.id
    assert ttr.created_by_user_id == captain.id
    assert ttr.status == TTRStatus.OPEN
    assert ttr.player_count == 1
    assert ttr.players[0].user_id == captain.id
    assert ttr.players[0].status == PlayerStatus.CONFIRMED


@pytest.mark.asyncio
@pytest.mark.parametrize("max_players", [0, -2])
async def test_create_ttr_rejects_non_positive_capacity(ttr_service, users, tee_slot, max_players):
    captain = users.add()
    with pytest.raises(InvalidArgumentError):
        await ttr_service.create_ttr(captain.id, max_players=max_players, **tee_slot)


@pytest.mark.asyncio
async def test_create_ttr_unknown_actor(ttr_service, tee_slot):
    with pytest.raises(ResourceNotFoundError):
        await ttr_service.create_ttr("00000000-0000-0000-0000-000000000000", max_players=4, **tee_slot)


@pytest.mark.asyncio
async def test_get_ttr_not_found(ttr_service):
    with pytest.raises(ResourceNotFoundError):
        await ttr_service.get_ttr("missing")


@pytest.mark.asyncio
async def test_delete_ttr_captain_only(ttr_service, ttrs, users, tee_slot):
    captain, co = users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    await ttr_service.add_co_captain(ttr.id, captain.id, co.id)

    with pytest.raises(PermissionDeniedError):
        await ttr_service.delete_ttr(ttr.id, co.id)

    await ttr_service.delete_ttr(ttr.id, captain.id)
    assert ttr.id not in ttrs.ttrs


# ================================================================
# update_ttr
# ================================================================

@pytest.mark.asyncio
async def test_update_ttr_applies_only_supplied_fields(ttr_service, users, tee_slot):
    captain = users.add()
    ttr = await ttr_service.create_ttr(
        captain.id, max_players=4, course_location="Monterey", notes="bring balls", **tee_slot
    )

    updated = await ttr_service.update_ttr(ttr.id, captain.id, notes=None, tee_time=time(9, 0))

    assert updated.notes is None                 # explicit None clears
    assert updated.tee_time == time(9, 0)
    assert updated.course_location == "Monterey"  # omitted, untouched
    assert updated.course_name == "Pebble Creek"


@pytest.mark.asyncio
async def test_update_ttr_by_co_captain(ttr_service, users, tee_slot):
    captain, co = users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    await ttr_service.add_co_captain(ttr.id, captain.id, co.id)

    updated = await ttr_service.update_ttr(ttr.id, co.id, status="CONFIRMED")
    assert updated.status == TTRStatus.CONFIRMED


@pytest.mark.asyncio
async def test_update_ttr_rejects_outsider(ttr_service, users, tee_slot):
    captain, outsider = users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    with pytest.raises(PermissionDeniedError):
        await ttr_service.update_ttr(ttr.id, outsider.id, notes="hi")


@pytest.mark.asyncio
async def test_update_ttr_capacity_below_roster_rejected(ttr_service, users, tee_slot):
    captain, player = users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    await ttr_service.join_ttr(ttr.id, player.id)

    with pytest.raises(InvalidArgumentError):
        await ttr_service.update_ttr(ttr.id, captain.id, max_players=1)
    with pytest.raises(InvalidArgumentError):
        await ttr_service.update_ttr(ttr.id, captain.id, max_players=0)

    updated = await ttr_service.update_ttr(ttr.id, captain.id, max_players=2)
    assert updated.max_players == 2


@pytest.mark.asyncio
async def test_update_ttr_invalid_values(ttr_service, users, tee_slot):
    captain = users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)

    with pytest.raises(InvalidArgumentError):
        await ttr_service.update_ttr(ttr.id, captain.id, status="POSTPONED")
    with pytest.raises(InvalidArgumentError):
        await ttr_service.update_ttr(ttr.id, captain.id, course_name=None)
    with pytest.raises(InvalidArgumentError):
        await ttr_service.update_ttr(ttr.id, captain.id, captain_user_id="someone")


@pytest.mark.asyncio
async def test_update_ttr_not_found(ttr_service, users):
    with pytest.raises(ResourceNotFoundError):
        await ttr_service.update_ttr("missing", users.add().id, notes="x")


# ================================================================
# co-captains
# ================================================================

@pytest.mark.asyncio
async def test_co_captain_management_is_captain_only(ttr_service, users, tee_slot):
    captain, co, other = users.add(), users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    await ttr_service.add_co_captain(ttr.id, captain.id, co.id)

    with pytest.raises(PermissionDeniedError):
        await ttr_service.add_co_captain(ttr.id, co.id, other.id)
    with pytest.raises(PermissionDeniedError):
        await ttr_service.remove_co_captain(ttr.id, co.id, co.id)

    assert await ttr_service.can_manage(ttr.id, co.id)
    assert not await ttr_service.is_captain(ttr.id, co.id)


@pytest.mark.asyncio
async def test_add_co_captain_errors(ttr_service, users, tee_slot):
    captain, co = users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)

    with pytest.raises(ResourceNotFoundError):
        await ttr_service.add_co_captain(ttr.id, captain.id, "ghost")

    await ttr_service.add_co_captain(ttr.id, captain.id, co.id)
    with pytest.raises(AlreadyExistsError):
        await ttr_service.add_co_captain(ttr.id, captain.id, co.id)


@pytest.mark.asyncio
async def test_remove_co_captain_revokes_management(ttr_service, users, tee_slot):
    captain, co = users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    await ttr_service.add_co_captain(ttr.id, captain.id, co.id)

    await ttr_service.remove_co_captain(ttr.id, captain.id, co.id)

    assert not await ttr_service.can_manage(ttr.id, co.id)
    with pytest.raises(ResourceNotFoundError):
        await ttr_service.remove_co_captain(ttr.id, captain.id, co.id)


@pytest.mark.asyncio
async def test_predicates_require_existing_ttr(ttr_service, users):
    with pytest.raises(ResourceNotFoundError):
        await ttr_service.can_manage("missing", users.add().id)
    with pytest.raises(ResourceNotFoundError):
        await ttr_service.is_captain("missing", users.add().id)


# ================================================================
# roster
# ================================================================

@pytest.mark.asyncio
async def test_join_full_roster(ttr_service, users, tee_slot):
    captain, latecomer = users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=1, **tee_slot)

    with pytest.raises(RosterFullError):
        await ttr_service.join_ttr(ttr.id, latecomer.id)
    assert len(await ttr_service.get_players(ttr.id)) == 1


@pytest.mark.asyncio
async def test_join_twice(ttr_service, users, tee_slot):
    captain, player = users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    await ttr_service.join_ttr(ttr.id, player.id)

    with pytest.raises(AlreadyExistsError):
        await ttr_service.join_ttr(ttr.id, player.id)


@pytest.mark.asyncio
async def test_join_missing_ttr(ttr_service, users):
    with pytest.raises(ResourceNotFoundError):
        await ttr_service.join_ttr("missing", users.add().id)


@pytest.mark.asyncio
async def test_captain_cannot_leave_even_when_alone(ttr_service, users, tee_slot):
    captain = users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    with pytest.raises(InvalidOperationError):
        await ttr_service.leave_ttr(ttr.id, captain.id)


@pytest.mark.asyncio
async def test_leave_ttr(ttr_service, users, tee_slot):
    captain, player, stranger = users.add(), users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    await ttr_service.join_ttr(ttr.id, player.id)

    await ttr_service.leave_ttr(ttr.id, player.id)
    assert [p.user_id for p in await ttr_service.get_players(ttr.id)] == [captain.id]

    with pytest.raises(ResourceNotFoundError):
        await ttr_service.leave_ttr(ttr.id, stranger.id)


@pytest.mark.asyncio
async def test_update_player_status_preserves_joined_at(ttr_service, users, tee_slot):
    captain, player = users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    await ttr_service.join_ttr(ttr.id, player.id)
    joined_at = (await ttr_service.get_ttr(ttr.id)).get_player(player.id).joined_at

    updated = await ttr_service.update_player_status(ttr.id, captain.id, player.id, "MAYBE")

    assert updated.status == PlayerStatus.MAYBE
    assert updated.joined_at == joined_at
    assert len(await ttr_service.get_players(ttr.id)) == 2


@pytest.mark.asyncio
async def test_update_player_status_errors(ttr_service, users, tee_slot):
    captain, player, outsider = users.add(), users.add(), users.add()
    ttr = await ttr_service.create_ttr(captain.id, max_players=4, **tee_slot)
    await ttr_service.join_ttr(ttr.id, player.id)

    with pytest.raises(PermissionDeniedError):
        await ttr_service.update_player_status(ttr.id, player.id, player.id, "DECLINED")
    with pytest.raises(InvalidArgumentError):
        await ttr_service.update_player_status(ttr.id, captain.id, player.id, "LATE")
    with pytest.raises(ResourceNotFoundError):
        await ttr_service.update_player_status(ttr.id, captain.id, outsider.id, "MAYBE")


# ================================================================
# listings
# ================================================================

@pytest.mark.asyncio
async def test_search_ttrs_orders_and_filters(ttr_service, users):
    captain = users.add()
    later = await ttr_service.create_ttr(
        captain.id, "Late Links", date(2099, 7, 2), time(7, 0), 4
    )
    earlier = await ttr_service.create_ttr(
        captain.id, "Early Links", date(2099, 7, 1), time(15, 0), 4
    )
    await ttr_service.update_ttr(later.id, captain.id, status="CANCELLED")

    everything = await ttr_service.search_ttrs()
    assert [t.id for t in everything] == [earlier.id, later.id]

    cancelled = await ttr_service.search_ttrs(status="CANCELLED")
    assert [t.id for t in cancelled] == [later.id]

    with pytest.raises(InvalidArgumentError):
        await ttr_service.search_ttrs(status="BOGUS")


@pytest.mark.asyncio
async def test_list_user_ttrs_upcoming_and_past(ttr_service, users):
    captain, player = users.add(), users.add()
    past = await ttr_service.create_ttr(captain.id, "Old Course", date(2001, 5, 5), time(9, 0), 4)
    future = await ttr_service.create_ttr(captain.id, "New Course", date(2099, 5, 5), time(9, 0), 4)
    await ttr_service.join_ttr(future.id, player.id)

    assert [t.id for t in await ttr_service.list_user_ttrs(captain.id)] == [future.id]
    assert [t.id for t in await ttr_service.list_user_ttrs(captain.id, upcoming=False)] == [past.id]
    assert [t.id for t in await ttr_service.list_user_ttrs(player.id)] == [future.id]
