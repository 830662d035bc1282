"""Merge on-chain pet fields with off-chain energy into one display view.

Field precedence:
- owner, tier, level, name, image: chain when the read succeeded, else DB
- energy: DB whenever a value was ever recorded (0 included); chain energy
  only seeds a pet the DB has never seen
An owner mismatch or an invalid token id drops the pet from the view.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime

from frothpet.models.pet import MAX_ENERGY, TIERS

logger = logging.getLogger(__name__)

MAX_TOKEN_ID = 1_000_000
_BRANDED_NAME = re.compile(r"^FROTH\s+Pet\s+#?", re.IGNORECASE)


@dataclass(frozen=True)
class ChainPetView:
    """What the NFT contract says. Pet fields are None when getPet failed."""
    owner: str | None
    level: int | None = None
    energy: int | None = None
    tier: str | None = None
    image_uri: str | None = None
    name: str | None = None

    @property
    def has_pet_data(self) -> bool:
        return self.tier is not None


@dataclass(frozen=True)
class DbPetView:
    owner: str
    tier: str
    level: int
    energy: int | None
    name: str
    image_uri: str = ""
    metadata_uri: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> "DbPetView":
        return cls(
            owner=record.owner,
            tier=record.tier,
            level=record.level,
            energy=record.energy,
            name=record.name,
            image_uri=record.image_uri or "",
            metadata_uri=record.metadata_uri or "",
            created_at=record.created_at,
        )


@dataclass(frozen=True)
class MergedPet:
    token_id: str
    owner: str
    tier: str
    level: int
    energy: int
    name: str
    image_uri: str
    metadata_uri: str = ""
    created_at: datetime | None = None


def parse_token_id(token_id) -> int | None:
    """Numeric token id in [0, MAX_TOKEN_ID], or None if it is not one."""
    try:
        value = int(str(token_id).strip())
    except (TypeError, ValueError):
        return None
    if value < 0 or value > MAX_TOKEN_ID:
        return None
    return value


def clean_pet_name(name: str | None, token_id) -> str:
    if not name:
        return f"Pet #{token_id}"
    return _BRANDED_NAME.sub("Pet #", name)


def _clamp_energy(value: int) -> int:
    return max(0, min(MAX_ENERGY, int(value)))


def _normalize_tier(tier: str | None) -> str:
    tier = (tier or "").lower()
    return tier if tier in TIERS else "common"


def reconcile(
    token_id,
    chain_view: ChainPetView | None,
    db_view: DbPetView | None,
    expected_owner: str,
) -> MergedPet | None:
    """Merged view of one pet for ``expected_owner``, or None to hide it.

    ``chain_view`` is None when the chain could not be read; ``db_view`` is
    None when the pet has no off-chain record yet.
    """
    if parse_token_id(token_id) is None:
        logger.warning("Skipping invalid tokenId: %r", token_id)
        return None
    token_id = str(token_id).strip()
    expected_owner = expected_owner.lower()

    if chain_view is None and db_view is None:
        return None

    if chain_view is not None and chain_view.owner is not None:
        if chain_view.owner.lower() != expected_owner:
            logger.info("Token %s owned by %s, not %s; excluding", token_id, chain_view.owner, expected_owner)
            return None
    elif db_view is not None and db_view.owner.lower() != expected_owner:
        return None

    if db_view is not None and db_view.energy is not None:
        energy = db_view.energy
    elif chain_view is not None and chain_view.energy is not None:
        energy = chain_view.energy
    else:
        energy = MAX_ENERGY

    use_chain = chain_view is not None and chain_view.has_pet_data
    if use_chain:
        tier = chain_view.tier
        level = chain_view.level if chain_view.level is not None else 1
        name = chain_view.name
        image_uri = chain_view.image_uri or ""
    elif db_view is not None:
        tier, level, name, image_uri = db_view.tier, db_view.level, db_view.name, db_view.image_uri
    else:
        # Owner verified on chain but no pet data anywhere
        return None

    return MergedPet(
        token_id=token_id,
        owner=expected_owner,
        tier=_normalize_tier(tier),
        level=max(1, int(level)),
        energy=_clamp_energy(energy),
        name=clean_pet_name(name, token_id),
        image_uri=image_uri,
        metadata_uri=db_view.metadata_uri if db_view is not None else "",
        created_at=db_view.created_at if db_view is not None else None,
    )
