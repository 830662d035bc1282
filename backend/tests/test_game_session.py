"""Tests for game sessions - energy on start, scoring events, finishing runs."""

import pytest

from frothpet.core.exceptions import (
    ForbiddenError,
    InsufficientEnergyError,
    NotFoundError,
)
from frothpet.core.session_engine import SessionEngine
from frothpet.services.energy_service import energy_service
from frothpet.services.game_session_service import GameSessionService
from frothpet.services.leaderboard_service import leaderboard_service

from conftest import WALLET_A, WALLET_B, make_pet

GAME = "froth-run"


@pytest.fixture
def sessions(redis):
    return GameSessionService(SessionEngine(redis))


async def test_start_spends_game_energy_cost(db, sessions):
    await make_pet(db, energy=100)

    started = await sessions.start_session(db, GAME, "1", WALLET_A)

    assert started.energy.previous_energy == 100
    assert started.energy.new_energy == 80
    assert started.session.status == "running"
    assert started.session.pet_name == "Pet #1"
    assert await energy_service.get_energy(db, "1") == 80


async def test_start_rejects_other_owner(db, sessions):
    await make_pet(db, owner=WALLET_B)
    with pytest.raises(ForbiddenError):
        await sessions.start_session(db, GAME, "1", WALLET_A)
    assert await energy_service.get_energy(db, "1") == 100


async def test_start_without_energy(db, sessions):
    await make_pet(db, energy=10)
    with pytest.raises(InsufficientEnergyError):
        await sessions.start_session(db, GAME, "1", WALLET_A)


async def test_start_unknown_game(db, sessions):
    await make_pet(db)
    with pytest.raises(NotFoundError):
        await sessions.start_session(db, "no-such-game", "1", WALLET_A)


async def test_obstacles_score_and_collision_ends_run(db, sessions):
    await make_pet(db)
    started = await sessions.start_session(db, GAME, "1", WALLET_A)
    sid = started.session.session_id

    await sessions.record_event(sid, "obstacle")
    state = await sessions.record_event(sid, "obstacle")
    assert (state.score, state.obstacles_cleared) == (20, 2)

    state = await sessions.record_event(sid, "collision")
    assert state.status == "crashed"
    state = await sessions.record_event(sid, "obstacle")
    assert state.score == 20


async def test_finish_submits_and_clears(db, sessions, redis):
    await make_pet(db)
    started = await sessions.start_session(db, GAME, "1", WALLET_A)
    sid = started.session.session_id
    for _ in range(3):
        await sessions.record_event(sid, "obstacle")

    submission, still_open = await sessions.finish_session(db, sid)

    assert still_open is False
    assert submission.is_new_best is True
    assert submission.entry.score == 30
    assert submission.entry.pet_token_id == "1"
    assert await redis.get(f"game:session:{sid}") is None
    with pytest.raises(NotFoundError):
        await sessions.record_event(sid, "obstacle")


async def test_restart_keeps_session_without_paying_again(db, sessions):
    await make_pet(db)
    started = await sessions.start_session(db, GAME, "1", WALLET_A)
    sid = started.session.session_id
    await sessions.record_event(sid, "collision")

    submission, still_open = await sessions.finish_session(db, sid, final_score=150, exit=False)

    assert still_open is True
    assert submission.entry.score == 150
    state = await sessions.record_event(sid, "obstacle")
    assert (state.status, state.score) == ("running", 10)
    assert await energy_service.get_energy(db, "1") == 80


async def test_finish_never_touches_energy(db, sessions):
    await make_pet(db)
    started = await sessions.start_session(db, GAME, "1", WALLET_A)
    await sessions.finish_session(db, started.session.session_id, final_score=5)

    assert await energy_service.get_energy(db, "1") == 80
    best = await leaderboard_service.get_best_score(db, GAME, WALLET_A)
    assert best.score == 5


async def test_finish_unknown_session(db, sessions):
    with pytest.raises(NotFoundError):
        await sessions.finish_session(db, "missing")
