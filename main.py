"""
Main entry point for TicTacToe vs. AI.

Launches the Tkinter UI by default, or a console game with --no-ui.

Run this script to play TicTacToe against the AI!
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from game import TicTacToeGame, TurnState
from logic.game_state import Difficulty
from oracle.config import OracleConfig
from storage.settings_store import SettingsStore
from telemetry import setup_logging


logger = logging.getLogger(__name__)


class ConsoleGame:
    """
    Plays the game in a terminal.

    Commands:
        0-8        place X in that cell
        r          restart
        d <level>  change difficulty (easy, medium, hard, trained)
        q          quit
    """

    def __init__(self, game: TicTacToeGame):
        self.game = game

    def print_board(self):
        """Print the board, with cell numbers in the empty cells."""
        cells = [
            cell.value if cell else str(i)
            for i, cell in enumerate(self.game.board)
        ]
        print()
        for start in (0, 3, 6):
            print(f"  {cells[start]} | {cells[start + 1]} | {cells[start + 2]}")
            if start < 6:
                print("  ---------")

    def print_status(self):
        scores = self.game.scores
        print(f"\nDifficulty: {self.game.difficulty.value}   "
              f"Wins: {scores.player_wins}  Draws: {scores.draws}  "
              f"AI Wins: {scores.ai_wins}  Played: {self.game.games_played}")
        if self.game.commentary:
            print(f'AI: "{self.game.commentary}"')
        print(self.game.status_text())

    def handle_command(self, line: str) -> bool:
        """
        Handle one line of input.

        Returns:
            False when the player wants to quit.
        """
        parts = line.strip().split()
        if not parts:
            return True

        command = parts[0].lower()
        if command in ("q", "quit", "exit"):
            return False
        if command in ("r", "restart"):
            self.game.reset()
            return True
        if command in ("d", "difficulty"):
            if len(parts) < 2:
                print("Usage: d easy|medium|hard|trained")
                return True
            try:
                self.game.set_difficulty(Difficulty.parse(parts[1]))
            except ValueError as e:
                print(e)
            return True

        if command.isdigit():
            if not self.game.human_move(int(command)):
                print("You can't play there.")
            return True

        print("Unknown command. Use 0-8, r, d <level> or q.")
        return True

    def run(self):
        print("\n" + "=" * 60)
        print("   TicTacToe vs. AI")
        print("=" * 60)
        print("You are X. Enter a cell number (0-8), r to restart, "
              "d <level> to change difficulty, q to quit.")

        while True:
            if self.game.state == TurnState.AI_TURN:
                print("\nAI is thinking...")
                move = self.game.play_ai_turn()
                print(f"AI played {move}")

            self.print_board()
            self.print_status()

            try:
                line = input("> ")
            except EOFError:
                break
            if not self.handle_command(line):
                break


def build_store(args) -> SettingsStore:
    if args.no_save:
        return SettingsStore.in_memory()
    return SettingsStore(path=Path(args.settings) if args.settings else None)


def build_console_game(store: SettingsStore, config: OracleConfig, **kwargs) -> TicTacToeGame:
    """Build the game for console play."""
    # The console prints once per turn, so wait for the comment
    kwargs.setdefault("think_delay", config.THINKING_DELAY_S)
    return TicTacToeGame(
        store=store,
        config=config,
        background_commentary=False,
        **kwargs
    )


def parse_args(argv: Optional[list] = None):
    parser = argparse.ArgumentParser(description="TicTacToe vs. AI")
    parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Play in the console instead of the window"
    )
    parser.add_argument(
        "--difficulty",
        choices=[d.value.lower() for d in Difficulty],
        help="AI difficulty (default: last used)"
    )
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Settings file to use"
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Don't read or write the settings file"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Also log to the console"
    )
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    store = build_store(args)
    if args.difficulty:
        store.save_difficulty(Difficulty.parse(args.difficulty))

    config = OracleConfig()
    if config.get_api_key() is None:
        logger.warning("No API key set; Hard and Trained will play the Medium strategy")

    # Launch UI by default
    if not args.no_ui:
        from ui import TicTacToeUI
        ui = TicTacToeUI(store=store, config=config)
        ui.run()
        return 0

    game = build_console_game(store, config)
    try:
        ConsoleGame(game).run()
    except KeyboardInterrupt:
        print("\n\nGame interrupted by user.")
    finally:
        print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
