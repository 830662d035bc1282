"""Tests for holder chat - address checks and the FROTH balance gate."""

import pytest

from conftest import WALLET_A, WALLET_B


class FrothChain:
    """Stands in for ChainReader with only the FROTH token configured."""

    has_pet_contract = False
    has_froth_contract = True

    def __init__(self, balances: dict):
        self.balances = balances

    def froth_balance_of(self, wallet: str) -> int:
        balance = self.balances.get(wallet, 0)
        if isinstance(balance, Exception):
            raise balance
        return balance


@pytest.fixture
def chain():
    return FrothChain({WALLET_A: 10**18, WALLET_B: 0})


async def _post(client, wallet, message="gm"):
    return await client.post("/api/chat/message", json={
        "sender": wallet[:6], "message": message, "walletAddress": wallet,
    })


async def test_holder_can_post_and_read(client):
    resp = await _post(client, WALLET_A.upper().replace("0X", "0x"), "  gm frens  ")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["walletAddress"] == WALLET_A
    assert data["message"] == "gm frens"

    await _post(client, WALLET_A, "second")
    resp = await client.get("/api/chat/messages")
    assert [m["message"] for m in resp.json()["data"]] == ["gm frens", "second"]


async def test_history_limit_keeps_newest(client):
    for i in range(5):
        await _post(client, WALLET_A, f"msg {i}")

    resp = await client.get("/api/chat/messages", params={"limit": 2})

    assert [m["message"] for m in resp.json()["data"]] == ["msg 3", "msg 4"]


async def test_non_holder_is_forbidden(client):
    resp = await _post(client, WALLET_B)
    assert resp.status_code == 403
    assert resp.json()["code"] == "forbidden"


async def test_invalid_address_rejected(client):
    resp = await _post(client, "0x1234")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid wallet address format"


async def test_balance_check_failure_lets_message_through(client, chain):
    chain.balances[WALLET_B] = ConnectionError("rpc down")
    resp = await _post(client, WALLET_B)
    assert resp.status_code == 200
