"""Chain service - read-only access to the pet NFT, shop and FROTH contracts.

Calls are blocking web3 HTTP round trips; async callers run them in a worker
thread. Writes (mint, buyFood, feed) are signed in the user's wallet and never
go through this service.
"""

import logging

from web3 import Web3
from web3.exceptions import ContractLogicError

from frothpet.config import settings
from frothpet.core.reconciliation import ChainPetView

logger = logging.getLogger(__name__)

PET_NFT_ABI = [
    {
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "name": "getPet",
        "outputs": [{
            "components": [
                {"name": "level", "type": "uint8"},
                {"name": "energy", "type": "uint8"},
                {"name": "tier", "type": "string"},
                {"name": "imageURI", "type": "string"},
                {"name": "name", "type": "string"},
            ],
            "name": "",
            "type": "tuple",
        }],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "name": "ownerOf",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "mintPrice",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

SHOP_ABI = [
    {
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "getBag",
        "outputs": [
            {"name": "burgerQty", "type": "uint256"},
            {"name": "ayamQty", "type": "uint256"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]

ERC20_BALANCE_ABI = [
    {
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class TokenNotFoundError(Exception):
    """ownerOf reverted: the token was never minted or has been burned."""


def is_valid_address(address: str | None) -> bool:
    return bool(address) and Web3.is_address(address) and int(address, 16) != 0


class ChainReader:
    """Read-only view of the deployed contracts.

    Contracts whose address is not configured are skipped; calling into one
    raises RuntimeError.
    """

    def __init__(
        self,
        provider_url: str | None = None,
        pet_nft_address: str | None = None,
        shop_address: str | None = None,
        froth_address: str | None = None,
    ):
        self.provider_url = provider_url or settings.WEB3_PROVIDER_URL
        self.web3 = Web3(Web3.HTTPProvider(self.provider_url))

        if not self.web3.is_connected():
            raise ConnectionError(f"Failed to connect to Web3 provider: {self.provider_url}")

        self.pet_nft = self._contract(pet_nft_address, PET_NFT_ABI)
        self.shop = self._contract(shop_address, SHOP_ABI)
        self.froth = self._contract(froth_address, ERC20_BALANCE_ABI)
        logger.info("Chain reader connected to %s", self.provider_url)

    def _contract(self, address: str | None, abi: list):
        if not is_valid_address(address):
            return None
        return self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    @property
    def has_pet_contract(self) -> bool:
        return self.pet_nft is not None

    @property
    def has_froth_contract(self) -> bool:
        return self.froth is not None

    def _require(self, contract, name: str):
        if contract is None:
            raise RuntimeError(f"{name} contract address not configured")
        return contract

    def owner_of(self, token_id: int) -> str:
        contract = self._require(self.pet_nft, "PetNFT")
        try:
            owner = contract.functions.ownerOf(int(token_id)).call()
        except ContractLogicError as exc:
            raise TokenNotFoundError(f"Token {token_id} does not exist") from exc
        return owner.lower()

    def get_pet(self, token_id: int) -> dict:
        contract = self._require(self.pet_nft, "PetNFT")
        level, energy, tier, image_uri, name = contract.functions.getPet(int(token_id)).call()
        return {
            "level": int(level),
            "energy": int(energy),
            "tier": tier.lower(),
            "image_uri": image_uri,
            "name": name,
        }

    def read_pet(self, token_id: int) -> ChainPetView:
        """ownerOf + getPet. A failed getPet still yields the verified owner."""
        owner = self.owner_of(token_id)
        try:
            pet = self.get_pet(token_id)
        except Exception as e:
            logger.warning("getPet(%s) failed, keeping stored pet fields: %s", token_id, e)
            return ChainPetView(owner=owner)
        return ChainPetView(owner=owner, **pet)

    def balance_of(self, owner: str) -> int:
        contract = self._require(self.pet_nft, "PetNFT")
        return int(contract.functions.balanceOf(Web3.to_checksum_address(owner)).call())

    def mint_price(self) -> int:
        contract = self._require(self.pet_nft, "PetNFT")
        return int(contract.functions.mintPrice().call())

    def get_bag(self, owner: str) -> tuple[int, int]:
        """On-chain (burger, ayam) counts held by the shop contract."""
        contract = self._require(self.shop, "Shop")
        burger, ayam = contract.functions.getBag(Web3.to_checksum_address(owner)).call()
        return int(burger), int(ayam)

    def froth_balance_of(self, owner: str) -> int:
        contract = self._require(self.froth, "FROTH")
        return int(contract.functions.balanceOf(Web3.to_checksum_address(owner)).call())


_reader: ChainReader | None = None


def get_chain_reader() -> ChainReader | None:
    """FastAPI dependency: the shared reader, or None to run DB-only.

    None when no contract is configured or the provider is unreachable.
    """
    global _reader
    if _reader is not None:
        return _reader
    if not any(is_valid_address(a) for a in (
        settings.PET_NFT_ADDRESS, settings.SHOP_ADDRESS, settings.FROTH_TOKEN_ADDRESS
    )):
        return None
    try:
        _reader = ChainReader(
            pet_nft_address=settings.PET_NFT_ADDRESS,
            shop_address=settings.SHOP_ADDRESS,
            froth_address=settings.FROTH_TOKEN_ADDRESS,
        )
    except ConnectionError as e:
        logger.warning("Chain unavailable, serving off-chain state only: %s", e)
        return None
    return _reader
