"""Tests for pet sync - mint registration and wallet views against a fake chain."""

import asyncio

import pytest
from sqlalchemy import func, select

from frothpet.core.exceptions import ConflictError, NotFoundError
from frothpet.core.reconciliation import ChainPetView
from frothpet.models.pet import PetRecord
from frothpet.models.wallet import WalletRecord
from frothpet.schemas.pet import PetSave, PetUpdate
from frothpet.services.chain_service import TokenNotFoundError
from frothpet.services.energy_service import energy_service
from frothpet.services.pet_sync_service import pet_sync_service
from frothpet.services.wallet_service import wallet_service

from conftest import WALLET_A, WALLET_B, make_pet


class FakeChain:
    """Stands in for ChainReader: token id -> ChainPetView, or an exception."""

    has_pet_contract = True
    has_froth_contract = False

    def __init__(self, pets: dict):
        self.pets = pets

    def read_pet(self, token_id: int) -> ChainPetView:
        value = self.pets[token_id]
        if isinstance(value, Exception):
            raise value
        return value


async def test_register_mint_creates_record(db):
    pet = await pet_sync_service.register_mint(db, PetSave(
        token_id="5", owner=WALLET_A.upper().replace("0X", "0x"), tier="Epic", name="FROTH Pet #5",
    ))

    assert pet.owner == WALLET_A
    assert pet.tier == "epic"
    assert pet.energy == 100
    assert pet.name == "Pet #5"
    wallet = await wallet_service.get_wallet(db, WALLET_A)
    assert wallet.has_nft is True


async def test_register_mint_never_overwrites_energy(db):
    await pet_sync_service.register_mint(db, PetSave(token_id="5", owner=WALLET_A))
    await energy_service.spend_energy(db, "5", 60)

    pet = await pet_sync_service.register_mint(db, PetSave(
        token_id="5", owner=WALLET_A, energy=100, level=2,
    ))

    assert pet.energy == 40
    assert pet.level == 2


async def test_update_pet_descriptive_fields(db):
    await make_pet(db, energy=55)
    pet = await pet_sync_service.update_pet(db, "1", PetUpdate(name="Biscuit", level=4))
    assert pet.name == "Biscuit"
    assert pet.level == 4
    assert pet.energy == 55


async def test_delete_pet(db):
    await make_pet(db)
    assert await pet_sync_service.delete_pet(db, "1") is True
    assert await pet_sync_service.delete_pet(db, "1") is False
    with pytest.raises(NotFoundError):
        await pet_sync_service.get_pet(db, "1")


async def test_sync_without_chain_serves_stored_records(db):
    await make_pet(db, token_id="2", energy=20)
    await make_pet(db, token_id="1", energy=70)
    await make_pet(db, token_id="3", owner=WALLET_B)

    pets = await pet_sync_service.sync_wallet(db, WALLET_A, None)

    assert [(p.token_id, p.energy) for p in pets] == [("1", 70), ("2", 20)]


async def test_sync_keeps_db_energy_and_mirrors_chain_fields(db):
    await make_pet(db, token_id="1", energy=37, tier="common", level=1)
    chain = FakeChain({1: ChainPetView(owner=WALLET_A, level=4, energy=100, tier="Legendary",
                                       image_uri="ipfs://new", name="FROTH Pet #1")})

    pets = await pet_sync_service.sync_wallet(db, WALLET_A, chain)

    assert len(pets) == 1
    assert pets[0].energy == 37
    assert pets[0].tier == "legendary"
    assert pets[0].level == 4
    stored = await pet_sync_service.get_pet(db, "1")
    assert stored.tier == "legendary"
    assert stored.image_uri == "ipfs://new"
    assert stored.energy == 37


async def test_sync_moves_transferred_pet_to_new_owner(db):
    await make_pet(db, token_id="1", energy=45)
    chain = FakeChain({1: ChainPetView(owner=WALLET_B, level=1, energy=100, tier="common",
                                       image_uri="", name="Pet #1")})

    assert await pet_sync_service.sync_wallet(db, WALLET_A, chain) == []

    stored = await pet_sync_service.get_pet(db, "1")
    assert stored.owner == WALLET_B
    assert stored.energy == 45
    assert (await wallet_service.get_wallet(db, WALLET_A)).has_nft is False

    pets = await pet_sync_service.sync_wallet(db, WALLET_B, chain)
    assert [p.token_id for p in pets] == ["1"]


async def test_sync_excludes_nonexistent_tokens(db):
    await make_pet(db, token_id="1")
    chain = FakeChain({1: TokenNotFoundError("burned")})

    assert await pet_sync_service.sync_wallet(db, WALLET_A, chain) == []


async def test_sync_degrades_when_chain_read_fails(db):
    await make_pet(db, token_id="1", energy=12, tier="epic")
    chain = FakeChain({1: ConnectionError("rpc down")})

    pets = await pet_sync_service.sync_wallet(db, WALLET_A, chain)

    assert [(p.token_id, p.energy, p.tier) for p in pets] == [("1", 12, "epic")]


async def test_sync_skips_placeholder_token_ids(db):
    await make_pet(db, token_id="1700000000000")
    await make_pet(db, token_id="7")

    pets = await pet_sync_service.sync_wallet(db, WALLET_A, None)

    assert [p.token_id for p in pets] == ["7"]


async def _race(session_factory, call):
    """Run ``call(session)`` in two sessions at once; ConflictError is a valid outcome."""

    async def attempt():
        async with session_factory() as session:
            try:
                result = await call(session)
                await session.commit()
                return result
            except ConflictError as e:
                await session.rollback()
                return e

    return await asyncio.gather(attempt(), attempt())


async def test_concurrent_mint_registrations_leave_one_record(session_factory):
    results = await _race(
        session_factory,
        lambda s: pet_sync_service.register_mint(s, PetSave(token_id="9", owner=WALLET_A)),
    )

    assert any(isinstance(r, PetRecord) for r in results)
    assert all(isinstance(r, (PetRecord, ConflictError)) for r in results)
    async with session_factory() as check:
        count = await check.scalar(select(func.count()).select_from(PetRecord))
        assert count == 1


async def test_concurrent_wallet_syncs_leave_one_record(session_factory):
    results = await _race(
        session_factory, lambda s: wallet_service.sync_wallet(s, WALLET_B, has_nft=True)
    )

    assert any(isinstance(r, WalletRecord) for r in results)
    assert all(isinstance(r, (WalletRecord, ConflictError)) for r in results)
    async with session_factory() as check:
        count = await check.scalar(select(func.count()).select_from(WalletRecord))
        assert count == 1
