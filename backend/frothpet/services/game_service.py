"""Game service - loads the game catalog (energy cost, scoring) from YAML."""

from pathlib import Path

import yaml

from frothpet.core.exceptions import NotFoundError
from frothpet.schemas.game import GameConfig

DATA_DIR = Path(__file__).parent.parent / "data" / "games"


class GameService:
    def __init__(self, data_dir: Path = DATA_DIR):
        self.data_dir = data_dir
        self._cache: dict[str, GameConfig] = {}

    def load_game(self, game_id: str) -> GameConfig:
        """Load a game config from its YAML file."""
        if game_id in self._cache:
            return self._cache[game_id]

        file_path = self.data_dir / f"{game_id}.yaml"
        if not file_path.is_file():
            raise NotFoundError(f"Game not found: {game_id}")

        with open(file_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)

        config = GameConfig(**raw)
        self._cache[game_id] = config
        return config

    def list_games(self) -> list[GameConfig]:
        return [self.load_game(path.stem) for path in sorted(self.data_dir.glob("*.yaml"))]


game_service = GameService()
