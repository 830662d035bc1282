"""Tests for the leaderboard service - personal-best merge and ranked reads."""

import pytest

from frothpet.core.exceptions import ValidationError
from frothpet.models.leaderboard import MAX_SCORE, LeaderboardEntry
from frothpet.services.leaderboard_service import (
    coerce_score,
    dedupe_by_wallet,
    leaderboard_service,
)

from conftest import WALLET_A, WALLET_B

GAME = "froth-run"


async def test_first_submission_is_new_best(db):
    result = await leaderboard_service.submit_score(db, WALLET_A, GAME, 120, "Pet #1", "1")

    assert result.is_new_best is True
    assert result.previous_best is None
    assert result.entry.score == 120
    assert result.entry.created_at is not None


async def test_scores_only_ever_go_up(db):
    flags = []
    for score in [50, 30, 80, 20]:
        result = await leaderboard_service.submit_score(db, WALLET_A, GAME, score)
        flags.append(result.is_new_best)

    assert flags == [True, False, True, False]
    best = await leaderboard_service.get_best_score(db, GAME, WALLET_A)
    assert best.score == 80


async def test_new_best_reports_previous_and_keeps_created_at(db):
    first = await leaderboard_service.submit_score(db, WALLET_A, GAME, 10, "Old", "1")
    created_at = first.entry.created_at

    result = await leaderboard_service.submit_score(db, WALLET_A, GAME, 99, "New", "2")

    assert result.previous_best == 10
    assert result.entry.pet_name == "New"
    assert result.entry.pet_token_id == "2"
    assert result.entry.created_at == created_at


async def test_lower_score_returns_stored_entry_unchanged(db):
    await leaderboard_service.submit_score(db, WALLET_A, GAME, 70, "Keeper", "1")
    result = await leaderboard_service.submit_score(db, WALLET_A, GAME, 70, "Other", "2")

    assert result.is_new_best is False
    assert result.entry.score == 70
    assert result.entry.pet_name == "Keeper"


async def test_zero_never_beats_a_positive_score(db):
    await leaderboard_service.submit_score(db, WALLET_A, GAME, 5)
    result = await leaderboard_service.submit_score(db, WALLET_A, GAME, 0)
    assert result.is_new_best is False


def test_coerce_score():
    assert coerce_score(12.9) == 12
    assert coerce_score(-4) == 0
    assert coerce_score("33") == 33
    assert coerce_score(1e12) == MAX_SCORE
    for bad in (None, "abc", float("nan"), True):
        with pytest.raises(ValidationError):
            coerce_score(bad)


async def test_top_scores_sorted_and_limited(db):
    wallets = [f"0x{i:040x}" for i in range(1, 6)]
    for i, wallet in enumerate(wallets):
        await leaderboard_service.submit_score(db, wallet, GAME, (i + 1) * 10)
    await leaderboard_service.submit_score(db, WALLET_A, "other-game", 999)

    top = await leaderboard_service.get_top_scores(db, GAME, 3)

    assert [e.score for e in top] == [50, 40, 30]


async def test_top_scores_collapse_legacy_duplicate_wallets(db):
    # Legacy rows from before addresses were lowercased: same wallet twice
    db.add(LeaderboardEntry(wallet_address=WALLET_A.replace("abc", "ABC"), game_id=GAME, score=40))
    db.add(LeaderboardEntry(wallet_address=WALLET_A, game_id=GAME, score=90))
    db.add(LeaderboardEntry(wallet_address=WALLET_B, game_id=GAME, score=60))
    await db.flush()

    top = await leaderboard_service.get_top_scores(db, GAME, 10)

    assert [(e.wallet_address.lower(), e.score) for e in top] == [(WALLET_A, 90), (WALLET_B, 60)]


def test_dedupe_keeps_highest_row_per_wallet():
    rows = [
        LeaderboardEntry(wallet_address=WALLET_A, game_id=GAME, score=40),
        LeaderboardEntry(wallet_address=WALLET_B, game_id=GAME, score=50),
        LeaderboardEntry(wallet_address=WALLET_A, game_id=GAME, score=90),
    ]

    top = dedupe_by_wallet(rows, 10)

    assert [(e.wallet_address, e.score) for e in top] == [(WALLET_A, 90), (WALLET_B, 50)]
    assert len(dedupe_by_wallet(rows, 1)) == 1


async def test_best_score_missing(db):
    assert await leaderboard_service.get_best_score(db, GAME, WALLET_A) is None


async def test_oversized_score_is_stored_at_the_cap(db):
    result = await leaderboard_service.submit_score(db, WALLET_A, GAME, 1e12)
    assert result.entry.score == MAX_SCORE

    result = await leaderboard_service.submit_score(db, WALLET_A, GAME, 5e12)
    assert result.is_new_best is False
