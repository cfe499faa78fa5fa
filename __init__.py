"""
TicTacToe vs. AI
================
A single-player TicTacToe game against a computer opponent.
Easy and Medium play locally; Hard and Trained ask a Gemini model for
their moves and fall back to the Medium strategy whenever that fails.

The human always plays X and moves first.
"""

__version__ = "1.0.0"
