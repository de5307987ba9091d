"""
Tests for the game session: modes, the AI's turn, undo and reset.
"""

import threading

import numpy as np
import pytest

from tictactoe import (
    AIPlayer,
    Board,
    Difficulty,
    GameConfig,
    GameSession,
    Mode,
    OutcomeKind,
    Player,
)


def _config(**overrides):
    settings = dict(RANDOM_THINK_DELAY=0, OPTIMAL_THINK_DELAY=0)
    settings.update(overrides)
    return GameConfig(**settings)


class BlockingAI(AIPlayer):
    """AI that waits for the test to let it answer."""

    def __init__(self):
        super().__init__(Player.O)
        self.started = threading.Event()
        self.gate = threading.Event()

    def choose_move(self, board, difficulty=Difficulty.OPTIMAL):
        self.started.set()
        self.gate.wait(5)
        return super().choose_move(board, difficulty)


@pytest.fixture
def pvp():
    session = GameSession(_config())
    session.set_mode(Mode.PLAYER_VS_PLAYER)
    return session


@pytest.fixture
def pvai():
    session = GameSession(_config())
    session.set_mode(Mode.PLAYER_VS_AI)
    yield session
    session.request_reset()
    session.wait_for_ai(5)


def test_starts_in_menu():
    session = GameSession(_config())
    state = session.get_state()

    assert state.mode == Mode.MENU
    assert state.board == Board.empty()
    assert state.turn == Player.X
    assert not state.ai_busy
    assert not state.can_undo
    assert state.difficulty == Difficulty.OPTIMAL


def test_no_moves_in_menu():
    session = GameSession(_config())
    assert not session.request_move(4)
    assert session.get_state().board == Board.empty()


def test_player_vs_player(pvp):
    assert pvp.request_move(4)
    assert pvp.request_move(0)
    state = pvp.get_state()

    assert state.board.to_string() == "O...X...."
    assert state.turn == Player.X
    assert not state.ai_busy
    assert state.can_undo


def test_illegal_human_move_is_noop(pvp):
    assert pvp.request_move(4)
    before = pvp.get_state()

    assert not pvp.request_move(4)
    assert not pvp.request_move(9)
    assert pvp.get_state() == before


def test_win_in_player_vs_player(pvp):
    for index in [0, 3, 1, 4, 2]:
        assert pvp.request_move(index)

    state = pvp.get_state()
    assert state.outcome.kind == OutcomeKind.WIN
    assert state.outcome.winner == Player.X
    assert state.outcome.line == (0, 1, 2)
    assert state.status_text == "X wins!"
    assert not pvp.request_move(8)


def test_ai_replies_to_human(pvai):
    assert pvai.request_move(4)
    assert pvai.wait_for_ai(5)

    state = pvai.get_state()
    assert state.board[4] == Player.X
    assert state.board[0] == Player.O
    assert state.turn == Player.X
    assert state.outcome.kind == OutcomeKind.ONGOING
    assert not state.ai_busy


def test_human_cannot_move_while_ai_thinks():
    session = GameSession(_config(OPTIMAL_THINK_DELAY=30))
    session.set_mode(Mode.PLAYER_VS_AI)

    assert session.request_move(4)
    state = session.get_state()
    assert state.ai_busy
    assert not state.can_undo
    assert state.status_text == "AI is thinking..."

    assert not session.request_move(0)
    assert not session.request_undo()
    assert session.get_state().board.to_string() == "....X...."

    session.request_reset()
    assert session.wait_for_ai(5)


def test_reset_cancels_thinking_ai():
    session = GameSession(_config(OPTIMAL_THINK_DELAY=30))
    session.set_mode(Mode.PLAYER_VS_AI)
    assert session.request_move(4)

    session.request_reset()
    state = session.get_state()
    assert not state.ai_busy
    assert state.board == Board.empty()

    # The cancelled turn wakes up at once and does nothing
    assert session.wait_for_ai(5)
    assert session.get_state().board == Board.empty()
    assert session.get_state().mode == Mode.PLAYER_VS_AI


def test_stale_ai_move_discarded_after_reset():
    ai = BlockingAI()
    session = GameSession(_config(), ai=ai)
    session.set_mode(Mode.PLAYER_VS_AI)

    assert session.request_move(4)
    assert ai.started.wait(5)

    session.request_reset()
    ai.gate.set()
    assert session.wait_for_ai(5)

    state = session.get_state()
    assert state.board == Board.empty()
    assert not state.can_undo
    assert not state.ai_busy


def test_stale_ai_move_not_applied_to_new_game():
    ai = BlockingAI()
    session = GameSession(_config(), ai=ai)
    session.set_mode(Mode.PLAYER_VS_AI)

    assert session.request_move(4)
    assert ai.started.wait(5)
    session.set_mode(Mode.PLAYER_VS_PLAYER)

    # New game: X plays where the old AI reply would go
    assert session.request_move(0)
    ai.gate.set()
    session.wait_for_ai(5)

    assert session.get_state().board.to_string() == "X........"
    assert session.get_state().turn == Player.O


def test_undo_in_player_vs_player(pvp):
    assert pvp.request_move(4)
    assert pvp.request_move(0)
    assert pvp.request_undo()

    state = pvp.get_state()
    assert state.board.to_string() == "....X...."
    assert state.turn == Player.O
    assert pvp.request_undo()
    assert not pvp.request_undo()
    assert pvp.get_state().board == Board.empty()


def test_undo_ai_move_lets_ai_move_again(pvai):
    assert pvai.request_move(4)
    assert pvai.wait_for_ai(5)

    assert pvai.request_undo()
    assert pvai.wait_for_ai(5)

    state = pvai.get_state()
    assert state.board.to_string() == "O...X...."
    assert state.turn == Player.X


def test_reset_to_menu(pvp):
    assert pvp.request_move(4)
    pvp.request_reset(to_menu=True)

    state = pvp.get_state()
    assert state.mode == Mode.MENU
    assert state.board == Board.empty()
    assert state.turn == Player.X
    assert not state.can_undo


def test_reset_keeps_mode(pvp):
    for index in [0, 3, 1, 4, 2]:
        pvp.request_move(index)
    pvp.request_reset()

    state = pvp.get_state()
    assert state.mode == Mode.PLAYER_VS_PLAYER
    assert state.board == Board.empty()
    assert state.outcome.kind == OutcomeKind.ONGOING


def test_set_mode_resets(pvp):
    assert pvp.request_move(4)
    pvp.set_mode(Mode.PLAYER_VS_AI)

    state = pvp.get_state()
    assert state.mode == Mode.PLAYER_VS_AI
    assert state.board == Board.empty()


def test_set_difficulty_used_on_next_ai_move():
    session = GameSession(_config(AI_SEED=5))
    session.set_mode(Mode.PLAYER_VS_AI)
    session.set_difficulty(Difficulty.RANDOM)
    assert session.get_state().difficulty == Difficulty.RANDOM

    expected = AIPlayer(Player.O, seed=5).choose_move(
        Board.empty().place(4, Player.X), Difficulty.RANDOM
    )
    assert session.request_move(4)
    assert session.wait_for_ai(5)
    assert session.get_state().board[expected] == Player.O


def test_ai_never_loses_to_scripted_player(pvai):
    # Human always plays the first empty cell
    while not pvai.get_state().outcome.is_over:
        board = pvai.get_state().board
        assert pvai.request_move(board.empty_cells()[0])
        assert pvai.wait_for_ai(5)

    assert pvai.get_state().outcome.winner != Player.X


def test_listeners_see_changes(pvp):
    states = []
    pvp.add_listener(states.append)

    pvp.request_move(4)
    pvp.request_move(4)     # rejected, no notification
    pvp.request_undo()
    pvp.request_reset()

    assert len(states) == 3
    assert states[0].board[4] == Player.X
    assert states[1].board == Board.empty()

    pvp.remove_listener(states.append)
    pvp.request_move(0)
    assert len(states) == 3


def test_listener_notified_after_ai_move():
    ai = BlockingAI()
    session = GameSession(_config(), ai=ai)
    session.set_mode(Mode.PLAYER_VS_AI)
    seen = []
    session.add_listener(seen.append)

    assert session.request_move(4)
    ai.gate.set()
    assert session.wait_for_ai(5)

    assert seen[0].ai_busy
    assert not seen[-1].ai_busy
    assert seen[-1].board.count(Player.O) == 1
    assert len(seen) == 2


def test_config_rejects_unknown_setting():
    with pytest.raises(AttributeError):
        GameConfig(NOT_A_SETTING=1)


def test_numpy_index_from_ui(pvp):
    assert pvp.request_move(np.int64(4))
    assert pvp.get_state().board[4] == Player.X


class FailingAI(AIPlayer):
    def choose_move(self, board, difficulty=Difficulty.OPTIMAL):
        raise RuntimeError("search blew up")


def test_ai_failure_is_logged(caplog, monkeypatch):
    raised = []
    monkeypatch.setattr(threading, "excepthook", raised.append)
    session = GameSession(_config(), ai=FailingAI(Player.O))
    session.set_mode(Mode.PLAYER_VS_AI)

    with caplog.at_level("ERROR", logger="tictactoe.session"):
        assert session.request_move(4)
        assert session.wait_for_ai(5)

    assert "AI turn failed" in caplog.text
    assert "search blew up" in caplog.text
    assert raised and raised[0].exc_type is RuntimeError
    state = session.get_state()
    assert not state.ai_busy
    assert state.board.to_string() == "....X...."
