"""Process-wide scoresheet defaults via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from scoresheet.logic.enums import GameMode, TieRankMode, UmaPreset
from scoresheet.logic.rules import PresetUma, RuleConfig


class ScoresheetSettings(BaseSettings):
    model_config = {"env_prefix": "SCORESHEET_"}

    default_game_mode: GameMode = GameMode.YONMA
    default_uma_preset: UmaPreset = UmaPreset.TEN_THIRTY
    default_tobi_bonus: int = Field(default=20, ge=0)
    default_tie_rank_mode: TieRankMode = TieRankMode.SHARED_SPLIT
    log_dir: str | None = Field(default=None, min_length=1)

    def default_rules(self) -> RuleConfig:
        """Rules a new match starts with. Start/return points follow the game mode."""
        return RuleConfig(
            game_mode=self.default_game_mode,
            uma=PresetUma(preset=self.default_uma_preset),
            tobi_bonus=self.default_tobi_bonus,
            tie_rank_mode=self.default_tie_rank_mode,
        )
