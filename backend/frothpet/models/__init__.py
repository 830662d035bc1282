"""Database models package."""

from frothpet.models.pet import PetRecord
from frothpet.models.wallet import WalletRecord
from frothpet.models.bag import BagRecord, BagCredit
from frothpet.models.leaderboard import LeaderboardEntry
from frothpet.models.chat_history import ChatMessage

__all__ = ["PetRecord", "WalletRecord", "BagRecord", "BagCredit", "LeaderboardEntry", "ChatMessage"]
