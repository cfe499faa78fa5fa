"""
TicTacToe vs. AI UI
A graphical interface for the game using Tkinter.

Shows:
- The 3x3 board (winning line highlighted)
- Game status and AI commentary
- Scores (wins, draws, AI wins, games played)
- Difficulty selection, restart and a dark / light theme toggle
"""

import logging
import tkinter as tk
from tkinter import ttk
from typing import Optional

from game import TicTacToeGame, TurnState
from logic.game_state import Difficulty, Mark
from oracle.config import OracleConfig
from storage.settings_store import SettingsStore


logger = logging.getLogger(__name__)


THEMES = {
    "dark": {
        "bg": "#1a1a2e",
        "panel": "#16213e",
        "cell": "#0f3460",
        "fg": "white",
        "muted": "#94a3b8",
        "win": "#b45309",
        "selected": "#6366f1",
        "button": "#2d3748",
    },
    "light": {
        "bg": "#f1f5f9",
        "panel": "#e2e8f0",
        "cell": "#cbd5e1",
        "fg": "#1e293b",
        "muted": "#64748b",
        "win": "#facc15",
        "selected": "#6366f1",
        "button": "#94a3b8",
    },
}

MARK_COLORS = {
    Mark.X: "#3b82f6",  # Blue for the human
    Mark.O: "#ef4444",  # Red for the AI
}


class TicTacToeUI:
    """
    Main UI class for TicTacToe vs. AI.
    """

    def __init__(
        self,
        store: Optional[SettingsStore] = None,
        config: Optional[OracleConfig] = None,
        game: Optional[TicTacToeGame] = None,
    ):
        """Initialize the UI."""
        self.store = store or SettingsStore.in_memory()
        self.config = config or OracleConfig()
        self.dark_mode = self.store.load_dark_mode()

        self.game = game or TicTacToeGame(
            store=self.store,
            config=self.config,
            think_delay=self.config.THINKING_DELAY_S,
        )
        # Worker threads report back through the Tk event loop
        self.game.on_change = lambda _game: self.root.after(0, self._refresh)

        self._create_ui()
        self._apply_theme()
        self._refresh()

    def _create_ui(self):
        """Create the Tkinter UI."""
        self.root = tk.Tk()
        self.root.title("AI Tic-Tac-Toe")
        self.root.minsize(420, 620)

        self.style = ttk.Style()
        self.style.theme_use('clam')

        self.main_frame = ttk.Frame(self.root)
        self.main_frame.pack(fill=tk.BOTH, expand=True, padx=16, pady=16)

        # Header with theme toggle
        header = ttk.Frame(self.main_frame)
        header.pack(fill=tk.X)
        ttk.Label(header, text="AI Tic-Tac-Toe", style='Title.TLabel').pack(side=tk.LEFT)
        self.theme_btn = tk.Button(header, width=3, command=self._toggle_theme)
        self.theme_btn.pack(side=tk.RIGHT)

        self.difficulty_label = ttk.Label(self.main_frame, text="")
        self.difficulty_label.pack(pady=(4, 10))

        # Scoreboard
        score_frame = ttk.Frame(self.main_frame)
        score_frame.pack(pady=5)
        self.score_labels = {}
        for key, title in (("player", "Wins"), ("draws", "Draws"),
                           ("ai", "AI Wins"), ("played", "Played")):
            column = ttk.Frame(score_frame)
            column.pack(side=tk.LEFT, padx=12)
            ttk.Label(column, text=title, style='Muted.TLabel').pack()
            label = ttk.Label(column, text="0", style='Score.TLabel')
            label.pack()
            self.score_labels[key] = label

        self.status_label = ttk.Label(self.main_frame, text="", style='Status.TLabel')
        self.status_label.pack(pady=10)

        # Board
        self.board_frame = ttk.Frame(self.main_frame)
        self.board_frame.pack(pady=5)

        self.board_cells = []
        for index in range(9):
            row, col = divmod(index, 3)
            cell = tk.Button(
                self.board_frame,
                text="",
                font=('Segoe UI', 28, 'bold'),
                width=3,
                height=1,
                relief='ridge',
                borderwidth=2,
                command=lambda i=index: self._on_cell_click(i)
            )
            cell.grid(row=row, column=col, padx=3, pady=3)
            self.board_cells.append(cell)

        self.commentary_label = ttk.Label(
            self.main_frame, text="", style='Comment.TLabel', wraplength=360, justify=tk.CENTER
        )
        self.commentary_label.pack(pady=12)

        # Difficulty
        ttk.Separator(self.main_frame, orient='horizontal').pack(fill=tk.X, pady=8)
        diff_frame = ttk.Frame(self.main_frame)
        diff_frame.pack(pady=5)
        self.difficulty_buttons = {}
        for level in Difficulty:
            btn = tk.Button(
                diff_frame,
                text=level.value,
                font=('Segoe UI', 10, 'bold'),
                width=8,
                command=lambda d=level: self._set_difficulty(d)
            )
            btn.pack(side=tk.LEFT, padx=3)
            self.difficulty_buttons[level] = btn

        tk.Button(
            self.main_frame,
            text="Restart Game",
            font=('Segoe UI', 11, 'bold'),
            bg='#10b981',
            fg='white',
            width=16,
            command=self._restart
        ).pack(pady=12)

        self.root.protocol("WM_DELETE_WINDOW", self._quit)

    def _theme(self) -> dict:
        return THEMES["dark" if self.dark_mode else "light"]

    def _apply_theme(self):
        """Apply the current dark / light palette."""
        theme = self._theme()
        self.root.configure(bg=theme["bg"])
        self.style.configure('TFrame', background=theme["bg"])
        self.style.configure('TLabel', background=theme["bg"], foreground=theme["fg"],
                             font=('Segoe UI', 11))
        self.style.configure('Title.TLabel', font=('Segoe UI', 20, 'bold'))
        self.style.configure('Muted.TLabel', foreground=theme["muted"], font=('Segoe UI', 9))
        self.style.configure('Score.TLabel', font=('Segoe UI', 16, 'bold'))
        self.style.configure('Status.TLabel', font=('Segoe UI', 16, 'bold'))
        self.style.configure('Comment.TLabel', foreground=theme["selected"],
                             font=('Segoe UI', 11, 'italic'))
        self.theme_btn.configure(
            text="☀" if self.dark_mode else "☾",
            bg=theme["button"], fg=theme["fg"]
        )
        self._refresh()

    def _refresh(self):
        """Redraw everything from the game state (UI thread only)."""
        theme = self._theme()
        game = self.game
        line = game.winning_line or ()

        for index, cell in enumerate(self.board_cells):
            mark = game.board[index]
            cell.configure(
                text=mark.value if mark else "",
                fg=MARK_COLORS.get(mark, theme["fg"]),
                bg=theme["win"] if index in line else theme["cell"],
                activebackground=theme["panel"],
            )

        self.status_label.configure(text=game.status_text())
        comment = game.commentary
        self.commentary_label.configure(text=f'"{comment}"' if comment else "")
        self.difficulty_label.configure(text=f"Difficulty: {game.difficulty.value}")

        self.score_labels["player"].configure(text=str(game.scores.player_wins))
        self.score_labels["draws"].configure(text=str(game.scores.draws))
        self.score_labels["ai"].configure(text=str(game.scores.ai_wins))
        self.score_labels["played"].configure(text=str(game.games_played))

        for level, btn in self.difficulty_buttons.items():
            if level == game.difficulty:
                btn.configure(bg=theme["selected"], fg='white')
            else:
                btn.configure(bg=theme["button"], fg=theme["fg"])

    def _on_cell_click(self, index: int):
        """Handle a click on a board cell."""
        if not self.game.human_move(index):
            return
        self._refresh()

        if self.game.state == TurnState.AI_TURN:
            # AI's turn - calculate in background
            self.game.start_ai_turn()

    def _set_difficulty(self, difficulty: Difficulty):
        """Set the AI difficulty level (starts a new game)."""
        if self.game.set_difficulty(difficulty):
            logger.info("Difficulty set to: %s", difficulty.value)
        self._refresh()

    def _toggle_theme(self):
        self.dark_mode = not self.dark_mode
        self.store.save_dark_mode(self.dark_mode)
        self._apply_theme()

    def _restart(self):
        self.game.reset()
        self._refresh()

    def _quit(self):
        """Quit the application."""
        self.root.quit()
        self.root.destroy()

    def run(self):
        """Run the UI main loop."""
        self.root.mainloop()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="TicTacToe vs. AI UI")
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Settings file to use"
    )
    args = parser.parse_args()

    ui = TicTacToeUI(store=SettingsStore(path=args.settings))
    ui.run()


if __name__ == "__main__":
    main()
