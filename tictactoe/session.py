"""
Game session for TicTacToe.

Ties together the game state and the AI opponent:
- Player vs Player or Player vs AI mode
- Runs the AI's turn in a background thread
- Undo, reset and the state snapshot a UI draws from
"""

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional
from dataclasses import dataclass

from .ai_player import AIPlayer, Difficulty
from .board import Board, Player
from .config import GameConfig
from .game_state import GameState
from .win_checker import Outcome

logger = logging.getLogger(__name__)


class Mode(Enum):
    """What kind of game is being played."""
    MENU = "menu"
    PLAYER_VS_PLAYER = "pvp"
    PLAYER_VS_AI = "ai"


@dataclass(frozen=True)
class SessionState:
    """Read-only snapshot of a session, for rendering."""
    board: Board
    outcome: Outcome
    mode: Mode
    turn: Player
    ai_busy: bool
    can_undo: bool
    difficulty: Difficulty

    @property
    def status_text(self) -> str:
        if self.outcome.is_over:
            return self.outcome.describe()
        if self.ai_busy:
            return "AI is thinking..."
        return self.outcome.describe(self.turn)


StateListener = Callable[[SessionState], None]


class GameSession:
    """
    Main controller for a TicTacToe session.

    Game flow in Player vs AI:
    1. Human (X) requests a move
    2. The move is applied and the board evaluated
    3. If the game goes on, the AI (O) thinks in a background thread
    4. The AI's move is applied and the human can move again

    Only one move is handled at a time. Human moves and undo are refused
    while the AI is busy. A reset cancels the AI's turn and its result is
    thrown away.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        ai: Optional[AIPlayer] = None
    ):
        """
        Initialize the session.

        Args:
            config: Game settings. Defaults to GameConfig().
            ai: The AI opponent. Defaults to an AIPlayer for config.AI_PLAYER.
        """
        self.config = config or GameConfig()
        self.ai = ai or AIPlayer(
            self.config.AI_PLAYER,
            seed=self.config.AI_SEED,
            config=self.config
        )

        self.game_state = GameState()
        self.mode = Mode(self.config.DEFAULT_MODE)
        self.difficulty = Difficulty(self.config.DEFAULT_DIFFICULTY)

        self._lock = threading.RLock()
        self._listeners: List[StateListener] = []

        # AI turn tracking. The generation goes up on every reset so an
        # AI thread started before it can tell its result is stale.
        self._generation = 0
        self._ai_busy = False
        self._ai_thread: Optional[threading.Thread] = None
        self._ai_cancel: Optional[threading.Event] = None

    # ==================== STATE ====================

    @property
    def ai_player(self) -> Player:
        return self.ai.player

    @property
    def ai_busy(self) -> bool:
        return self._ai_busy

    def get_state(self) -> SessionState:
        """Get a snapshot of the session."""
        with self._lock:
            return SessionState(
                board=self.game_state.board,
                outcome=self.game_state.outcome,
                mode=self.mode,
                turn=self.game_state.current_player,
                ai_busy=self._ai_busy,
                can_undo=self.game_state.can_undo and not self._ai_busy,
                difficulty=self.difficulty,
            )

    def add_listener(self, listener: StateListener):
        """Call listener with a new SessionState after every change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener):
        self._listeners.remove(listener)

    def _notify(self):
        state = self.get_state()
        for listener in list(self._listeners):
            listener(state)

    # ==================== PLAYER ACTIONS ====================

    def request_move(self, index: int) -> bool:
        """
        A human tries to move.

        Args:
            index: Cell index (0-8).

        Returns:
            True if the move was made. False means nothing changed.
        """
        with self._lock:
            if self.mode == Mode.MENU:
                logger.debug("Move %r ignored: no game in progress", index)
                return False

            if self._ai_busy:
                logger.debug("Move %r ignored: AI is thinking", index)
                return False

            if (self.mode == Mode.PLAYER_VS_AI and
                    self.game_state.current_player == self.ai_player):
                logger.debug("Move %r ignored: it's the AI's turn", index)
                return False

            if not self.game_state.apply_move(index):
                return False

            self._maybe_start_ai()

        self._notify()
        return True

    def request_undo(self) -> bool:
        """
        Take back the last move.

        Refused while the AI is thinking. In Player vs AI, undoing the AI's
        move gives the turn back to the AI, which moves again.

        Returns:
            True if a move was undone.
        """
        with self._lock:
            if self._ai_busy:
                logger.debug("Undo ignored: AI is thinking")
                return False

            if not self.game_state.undo():
                return False

            self._maybe_start_ai()

        self._notify()
        return True

    def request_reset(self, to_menu: bool = False):
        """
        Start the game again.

        Args:
            to_menu: Also go back to the menu.
        """
        with self._lock:
            self._reset_locked()
            if to_menu:
                self.mode = Mode.MENU

        logger.info("Game reset%s", " (back to menu)" if to_menu else "")
        self._notify()

    def set_mode(self, mode: Mode):
        """Switch mode. This always resets the game."""
        mode = Mode(mode)
        with self._lock:
            self.mode = mode
            self._reset_locked()

        logger.info("Mode set to: %s", mode.value)
        self._notify()

    def set_difficulty(self, difficulty: Difficulty):
        """Change the AI difficulty. Used from the AI's next decision on."""
        difficulty = Difficulty(difficulty)
        with self._lock:
            self.difficulty = difficulty

        logger.info("Difficulty set to: %s", difficulty.value)
        self._notify()

    def wait_for_ai(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the current AI turn has finished.

        Returns:
            True if no AI turn is running any more.
        """
        thread = self._ai_thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # ==================== AI TURN ====================

    def _reset_locked(self):
        """Reset the game and drop any AI turn in progress. Lock must be held."""
        self._generation += 1
        if self._ai_cancel is not None:
            self._ai_cancel.set()
        self._ai_busy = False
        self.game_state.reset()

    def _maybe_start_ai(self):
        """Start the AI's turn if it is due. Lock must be held."""
        if self.mode != Mode.PLAYER_VS_AI or self._ai_busy:
            return
        if self.game_state.current_player != self.ai_player:
            return
        if self.game_state.is_game_over:
            return

        self._ai_busy = True
        self._ai_cancel = threading.Event()
        self._ai_thread = threading.Thread(
            target=self._run_ai_turn,
            args=(self._generation, self.game_state.board, self._ai_cancel),
            name="ai-turn",
            daemon=True
        )
        self._ai_thread.start()

    def _run_ai_turn(self, generation: int, board: Board, cancel: threading.Event):
        """Think, choose and apply one AI move (runs in background thread)."""
        try:
            delay = self.config.think_delay(self.difficulty)
            if delay > 0 and cancel.wait(delay):
                logger.debug("AI turn cancelled while thinking")
                return

            with self._lock:
                if generation != self._generation:
                    return
                difficulty = self.difficulty

            move = self.ai.choose_move(board, difficulty)

            with self._lock:
                # The game may have been reset while we were searching
                if generation != self._generation:
                    logger.debug("Discarding stale AI move %d", move)
                    return

                if not self.game_state.apply_move(move, player=self.ai_player):
                    logger.warning("AI move %d was rejected", move)
        except Exception:
            logger.exception("AI turn failed")
            raise
        finally:
            with self._lock:
                is_current = generation == self._generation
                if is_current:
                    self._ai_busy = False
            if is_current:
                self._notify()
