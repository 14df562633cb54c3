"""Player model."""

from pydantic import BaseModel, ConfigDict, Field

from .card import CardSet


class Player(BaseModel):
    """Player state."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    player_id: str
    name: str = "Player"

    # Round state (reset on every deal)
    hand: CardSet = Field(default_factory=CardSet)
    captured: CardSet = Field(default_factory=CardSet)
    score: int = 0  # Base score derived from captured
    go_count: int = 0
    final_score: int = 0  # Set when the round finishes

    def reset_round_state(self) -> None:
        """Reset round-related state (called before every deal)."""
        self.hand = CardSet()
        self.captured = CardSet()
        self.score = 0
        self.go_count = 0
        self.final_score = 0

    def __str__(self) -> str:
        go = f" {self.go_count}go" if self.go_count else ""
        return f"{self.name}[{self.player_id}] {self.score}pt{go}"

    def __repr__(self) -> str:
        return (
            f"Player(id={self.player_id!r}, name={self.name!r}, "
            f"hand={len(self.hand)}, captured={len(self.captured)}, "
            f"score={self.score}, go_count={self.go_count})"
        )
