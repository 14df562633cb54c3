"""Base strategy class for Go-Stop players.

Defines the interface that all bot and advisory strategies implement.
Strategies only read session snapshots; they never mutate them.
"""

from abc import ABC, abstractmethod

from gostop_server.models.game_state import GameSession


class Strategy(ABC):
    """Abstract base class for game strategies."""

    @abstractmethod
    def select_card(self, session: GameSession, player_id: str) -> int:
        """Select the card to play on this player's turn.

        Args:
            session: Current session snapshot
            player_id: Player whose hand to choose from

        Returns:
            Id of a card in the player's hand
        """
        pass

    @abstractmethod
    def decide_go(self, session: GameSession, player_id: str) -> bool:
        """Decide between Go and Stop once a decision window opens.

        Args:
            session: Current session snapshot
            player_id: Player holding the decision

        Returns:
            True to declare Go, False to declare Stop
        """
        pass

    def describe(self, session: GameSession, player_id: str) -> str:
        """Human-readable hint for the player's next move."""
        player = session.get_player(player_id)
        if player is None or player.hand.is_empty():
            return "Nothing to play."
        card = player.hand.get(self.select_card(session, player_id))
        return f"Play {card}."
