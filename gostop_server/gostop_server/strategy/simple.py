"""Simple greedy strategy.

Strategy:
- Capture a Bright whenever possible
- Otherwise make the capture that takes the most (and most valuable) cards
- With no capture available, throw away the least valuable card
- Go while the opponent is still below the threshold and cards remain; Stop otherwise
"""

from gostop_server.game.go import DEFAULT_GO_THRESHOLD
from gostop_server.models.card import Card, Category
from gostop_server.models.game_state import GameSession

from .base import Strategy

CATEGORY_VALUE: dict[Category, int] = {
    Category.JUNK: 0,
    Category.DOUBLE_JUNK: 1,
    Category.RIBBON: 2,
    Category.ANIMAL: 3,
    Category.BRIGHT: 4,
}

# Keep going only while at least this many cards remain in hand
MIN_HAND_FOR_GO = 3


def card_value(card: Card) -> int:
    return CATEGORY_VALUE[card.category]


class SimpleStrategy(Strategy):
    """Greedy capture-first strategy."""

    def __init__(self, go_threshold: int = DEFAULT_GO_THRESHOLD):
        self.go_threshold = go_threshold

    def select_card(self, session: GameSession, player_id: str) -> int:
        player = session.get_player(player_id)
        hand = player.hand.to_list()
        if not hand:
            raise ValueError(f"Player {player_id} has no cards to play")

        best: tuple[int, int, int, int] | None = None
        best_card = hand[0]
        for card in hand:
            matched = session.floor.cards_by_month(card.month)
            if not matched:
                continue
            taken = [card, *matched]
            key = (
                int(any(c.is_bright for c in taken)),
                len(taken),
                sum(card_value(c) for c in taken),
                -card.id,
            )
            if best is None or key > best:
                best = key
                best_card = card

        if best is not None:
            return best_card.id

        return min(hand, key=lambda c: (card_value(c), c.id)).id

    def decide_go(self, session: GameSession, player_id: str) -> bool:
        player = session.get_player(player_id)
        opponent = session.opponent_of(player_id)
        opponent_threat = opponent is not None and opponent.score >= self.go_threshold
        return len(player.hand) >= MIN_HAND_FOR_GO and not opponent_threat

    def describe(self, session: GameSession, player_id: str) -> str:
        player = session.get_player(player_id)
        if player is None or player.hand.is_empty():
            return "Nothing to play."

        card = player.hand.get(self.select_card(session, player_id))
        matched = session.floor.cards_by_month(card.month)
        if not matched:
            return f"No capture available; throw away {card}."

        taken = ", ".join(str(c) for c in matched)
        hint = f"Play {card} to capture {taken}."
        if any(c.is_bright for c in [card, *matched]):
            hint += " That secures a Bright."
        return hint
