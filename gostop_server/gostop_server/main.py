"""Main entry point for Go-Stop self-play."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from gostop_server.config import Config, load_config
from gostop_server.errors import GameError
from gostop_server.game.go import can_declare_go
from gostop_server.logging import GameLogConfig, GameLogger
from gostop_server.models.game_state import GameSession, GameStatus
from gostop_server.service import GameService
from gostop_server.strategy import SimpleStrategy, Strategy
from gostop_server.utils.logger import GameDisplay, setup_logging

logger = logging.getLogger(__name__)

SESSION_ID = "self-play"
PLAYERS = (("p1", "Bot1"), ("p2", "Bot2"))


def generate_log_filename(log_dir: str, names: list[str]) -> str:
    """Generate log filename with timestamp and player names.

    Format: {ISO timestamp}_{player1}_{player2}.jsonl
    Player names are sorted alphabetically.

    Args:
        log_dir: Directory for log files.
        names: Player names.

    Returns:
        Full path to log file.
    """
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    player_names = "_".join(sorted(names))
    filename = f"{timestamp}_{player_names}.jsonl"
    return str(Path(log_dir) / filename)


def play_round(
    service: GameService,
    session_id: str,
    strategies: dict[str, Strategy],
) -> GameSession:
    """Drive one dealt round to completion with bot strategies.

    Returns:
        The finished session
    """
    threshold = service.config.rules.go_threshold
    while True:
        session = service.observe(session_id)
        if session.status != GameStatus.PLAYING:
            return session

        decider_id = session.awaiting_go_id
        if decider_id is not None:
            decider = session.get_player(decider_id)
            if can_declare_go(decider.score, threshold):
                if strategies[decider_id].decide_go(session, decider_id):
                    service.declare_go(session_id, decider_id)
                else:
                    service.declare_stop(session_id, decider_id)
                continue

        actor_id = session.turn_owner_id
        card_id = strategies[actor_id].select_card(session, actor_id)
        service.play_card(session_id, actor_id, card_id)


def run_games(
    service: GameService,
    session_id: str,
    host_id: str,
    strategies: dict[str, Strategy],
    num_games: int,
) -> dict[str, int]:
    """Play a number of rounds in one session.

    The winner of each round collects their final score; a drawn round
    scores nothing.

    Returns:
        Dict mapping player_id to total points
    """
    points = {player_id: 0 for player_id in strategies}

    for game_num in range(num_games):
        if game_num == 0:
            service.start_game(session_id, host_id)
        else:
            service.rematch(session_id, host_id)

        session = play_round(service, session_id, strategies)
        if session.winner_id is not None:
            points[session.winner_id] += session.get_player(session.winner_id).final_score

    return points


def run_match(config: Config, game_logger: GameLogger, display: GameDisplay) -> dict[str, int]:
    """Set up a session between two SimpleStrategy bots and play it out."""
    service = GameService(config, game_logger=game_logger)
    service.set_callbacks(
        on_game_start=lambda s: display.print_game_start(s, config.game.num_games),
        on_turn=display.print_turn,
        on_go=display.print_go,
        on_stop=display.print_stop,
        on_game_end=display.print_game_end,
    )

    (host_id, host_name), (guest_id, guest_name) = PLAYERS
    service.create_session(SESSION_ID, host_id, host_name)
    service.join_session(SESSION_ID, guest_id, guest_name)

    strategies: dict[str, Strategy] = {
        player_id: SimpleStrategy(config.rules.go_threshold) for player_id, _ in PLAYERS
    }
    points = run_games(service, SESSION_ID, host_id, strategies, config.game.num_games)

    ranking = sorted(points, key=lambda pid: points[pid], reverse=True)
    game_logger.log_session_end(config.game.num_games, points, ranking)
    return points


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success)
    """
    parser = argparse.ArgumentParser(
        description="Go-Stop (Matgo) rules engine self-play runner"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (YAML)",
    )
    parser.add_argument(
        "-n",
        "--num-games",
        type=int,
        help="Number of rounds to play (overrides config)",
    )
    parser.add_argument(
        "-s",
        "--seed",
        type=int,
        help="Shuffle seed (overrides config)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--show-hands",
        action="store_true",
        help="Show player hands in output",
    )
    parser.add_argument(
        "--game-log",
        type=Path,
        help="Directory for game log files (filename auto-generated)",
    )

    args = parser.parse_args()

    # Load config
    config = load_config(args.config)

    # Apply command-line overrides
    if args.num_games:
        config.game.num_games = args.num_games
    if args.seed is not None:
        config.game.seed = args.seed
    if args.verbose:
        config.logging.level = "DEBUG"
    if args.show_hands:
        config.logging.show_hands = True

    # CLI argument overrides config file
    game_log_enabled = args.game_log is not None or config.game_log.enabled
    game_log_dir = str(args.game_log) if args.game_log else config.game_log.output_dir

    setup_logging(config.logging.level)

    display = GameDisplay(show_hands=config.logging.show_hands)

    print("Go-Stop self-play starting...")
    print(f"Games: {config.game.num_games}")
    print(f"Seed: {config.game.seed if config.game.seed is not None else 'random'}")

    if game_log_enabled:
        log_path = generate_log_filename(game_log_dir, [name for _, name in PLAYERS])
        game_log_config = GameLogConfig(enabled=True, output_path=log_path)
        print(f"Game log: {log_path}")
    else:
        game_log_config = GameLogConfig(enabled=False)
    print()

    try:
        with GameLogger(game_log_config) as game_logger:
            points = run_match(config, game_logger, display)

        display.print_final_results(points, dict(PLAYERS))
        return 0

    except KeyboardInterrupt:
        print("\nSelf-play interrupted by user")
        return 1
    except GameError as e:
        logger.error(f"Game error [{e.code}]: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Self-play error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
