"""
Game configuration for TicTacToe.
All the settings for the AI opponent and the game session.
"""

from .board import Player


class GameConfig:
    """
    Configuration class for game settings.

    Class attributes hold the defaults. Pass keyword arguments to override
    them on one instance, e.g. GameConfig(RANDOM_THINK_DELAY=0).
    """

    # ==================== AI SETTINGS ====================
    # The AI is always the second mover
    AI_PLAYER = Player.O

    # "random" or "optimal"
    DEFAULT_DIFFICULTY = "optimal"

    # Artificial "thinking" pause before the AI moves (seconds)
    # Only for the player's benefit, set to 0 for tests
    RANDOM_THINK_DELAY = 0.5
    OPTIMAL_THINK_DELAY = 0.7

    # Seed for the random policy (None = fresh entropy)
    AI_SEED = None

    # ==================== SEARCH SCORES ====================
    # From the AI's point of view
    WIN_SCORE = 10
    LOSS_SCORE = -10
    DRAW_SCORE = 0

    # ==================== SESSION SETTINGS ====================
    # "menu", "pvp" or "ai"
    DEFAULT_MODE = "menu"

    def __init__(self, **overrides):
        for name, value in overrides.items():
            if not hasattr(type(self), name) or not name.isupper():
                raise AttributeError(f"Unknown config setting: {name}")
            setattr(self, name, value)

    def think_delay(self, difficulty) -> float:
        """Thinking pause for a difficulty (a Difficulty or its value)."""
        value = getattr(difficulty, "value", difficulty)
        if value == "random":
            return self.RANDOM_THINK_DELAY
        return self.OPTIMAL_THINK_DELAY
