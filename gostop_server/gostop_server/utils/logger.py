"""Logging utilities and game state display."""

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gostop_server.game.engine import TurnOutcome
    from gostop_server.models.game_state import GameSession


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


class GameDisplay:
    """Display game state to stdout."""

    def __init__(self, show_hands: bool = False):
        """Initialize display.

        Args:
            show_hands: Whether to show player hands
        """
        self.show_hands = show_hands

    def print_separator(self) -> None:
        """Print a separator line."""
        print("=" * 60)

    def print_game_start(self, session: "GameSession", num_games: int) -> None:
        """Print round start message."""
        self.print_separator()
        print(f"ROUND {session.round_number}/{num_games}")
        self.print_separator()
        print(f"Floor: {session.floor}")
        self.print_hands(session)

    def print_turn(self, session: "GameSession", outcome: "TurnOutcome") -> None:
        """Print one accepted play."""
        capture = outcome.capture
        actor = session.get_player(outcome.actor_id)
        print(f"\n{actor.name}: played {capture.played}, drew {capture.drawn or '-'}")
        for event in capture.events:
            cards = ", ".join(str(c) for c in event.cards)
            print(f"  -> captured ({event.source.value}): {cards}")
        print(f"  Floor: {session.floor}")
        print(f"  Score: {outcome.score}")
        self.print_hands(session)

    def print_go(self, session: "GameSession", player_id: str, go_count: int) -> None:
        """Print a Go declaration."""
        player = session.get_player(player_id)
        print(f"  ** {player.name}: {go_count} Go! **")

    def print_stop(self, session: "GameSession", player_id: str) -> None:
        """Print a Stop declaration."""
        player = session.get_player(player_id)
        print(f"  ** {player.name}: Stop! **")

    def print_hands(self, session: "GameSession") -> None:
        """Print hands for all players (if show_hands is enabled)."""
        if not self.show_hands:
            return

        for player in session.players:
            print(f"  {player.name} hand: {player.hand}")

    def print_game_end(self, session: "GameSession") -> None:
        """Print round end results."""
        print(f"\nRound {session.round_number} finished ({session.end_reason.value})")
        for player in session.players:
            go = f", {player.go_count} Go" if player.go_count else ""
            print(
                f"  {player.name}: {player.final_score} points "
                f"(base {player.score}{go}, {len(player.captured)} cards captured)"
            )
        winner = session.get_player(session.winner_id) if session.winner_id else None
        print(f"  Winner: {winner.name if winner else 'draw'}")

    def print_final_results(self, points: dict[str, int], names: dict[str, str]) -> None:
        """Print final results over all rounds."""
        self.print_separator()
        print("FINAL RESULTS")
        self.print_separator()

        # Sort by points descending
        sorted_players = sorted(points.items(), key=lambda x: x[1], reverse=True)

        for rank, (player_id, pts) in enumerate(sorted_players, 1):
            print(f"  #{rank}: {names[player_id]} ({player_id}) - {pts} points")
