import random
import threading

import pytest

from tictactoe_lobby.exceptions import SessionNotFound
from tictactoe_lobby.models import EMPTY, SYMBOLS, Player
from tictactoe_lobby.services.games import GameSessionStore
from tictactoe_lobby.services.games.engine import cell_at, empty_board


@pytest.fixture()
def store(stub_random):
    # alice is drawn first and gets X
    return GameSessionStore(rng=stub_random('alice', 'X'))


def test_start_game_with_fixed_draw(store):
    session = store.start_game('ABC', ['alice', 'bob'])
    assert session.players == (Player('alice', 'X'), Player('bob', 'O'))
    assert session.current_turn == Player('alice', 'X')
    assert session.board == empty_board()
    assert session.finished is False
    assert session.winner is None
    assert store.get('ABC') is session


@pytest.mark.parametrize('seed', range(20))
def test_start_game_always_assigns_distinct_symbols(seed):
    store = GameSessionStore(rng=random.Random(seed))
    session = store.start_game('R', ['alice', 'bob'])
    symbols = {p.symbol for p in session.players}
    assert symbols == set(SYMBOLS)
    assert {p.username for p in session.players} == {'alice', 'bob'}
    assert session.current_turn == session.players[0]


def test_start_game_second_player_is_the_other_member(stub_random):
    store = GameSessionStore(rng=stub_random('bob', 'O'))
    session = store.start_game('R', ['alice', 'bob'])
    assert session.players == (Player('bob', 'O'), Player('alice', 'X'))


def test_start_game_with_single_player_is_degraded(stub_random):
    store = GameSessionStore(rng=stub_random('alice', 'X'))
    session = store.start_game('SOLO', ['alice', 'alice'])
    assert session.players == (Player('alice', 'X'), Player('', 'O'))


def test_start_game_with_empty_pool_is_degraded():
    store = GameSessionStore(rng=random.Random(1))
    session = store.start_game('EMPTY', [])
    assert [p.username for p in session.players] == ['', '']
    assert {p.symbol for p in session.players} == set(SYMBOLS)


def test_start_game_overwrites_previous_session(store):
    store.start_game('ABC', ['alice', 'bob'])
    store.apply_turn('ABC', 0, 0)
    fresh = store.start_game('ABC', ['alice', 'bob'])
    assert store.get('ABC') is fresh
    assert fresh.board == empty_board()


def test_apply_turn_without_session_is_noop(store):
    assert store.apply_turn('NOPE', 0, 0) is None
    assert 'NOPE' not in store
    assert len(store) == 0


def test_apply_turn_places_mark_and_rotates_turn(store):
    store.start_game('ABC', ['alice', 'bob'])
    session = store.apply_turn('ABC', 0, 0)
    assert cell_at(session.board, 0, 0).mark == 'X'
    assert session.current_turn == Player('bob', 'O')
    session = store.apply_turn('ABC', 1, 1)
    assert cell_at(session.board, 1, 1).mark == 'O'
    assert session.current_turn == Player('alice', 'X')
    assert store.get('ABC') is session


def test_top_row_win_scenario(store):
    store.start_game('ABC', ['alice', 'bob'])
    store.apply_turn('ABC', 0, 0)  # alice X
    store.apply_turn('ABC', 1, 1)  # bob O
    session = store.apply_turn('ABC', 0, 1)  # alice X
    assert session.finished is False
    store.apply_turn('ABC', 2, 2)  # bob O
    session = store.apply_turn('ABC', 0, 2)  # alice X
    assert session.finished is True
    assert session.winner == 'alice'
    assert session.draw is False


def test_draw_leaves_winner_unset(store):
    store.start_game('ABC', ['alice', 'bob'])
    # X O X
    # X O O
    # O X X
    for x, y in [(0, 0), (0, 1), (0, 2), (1, 1), (1, 0), (1, 2), (2, 1), (2, 0), (2, 2)]:
        session = store.apply_turn('ABC', x, y)
    assert session.finished is False
    assert session.winner is None
    assert session.draw is True


def test_permissive_store_overwrites_and_keeps_playing(store):
    store.start_game('ABC', ['alice', 'bob'])
    store.apply_turn('ABC', 0, 0)
    session = store.apply_turn('ABC', 0, 0)
    assert cell_at(session.board, 0, 0).mark == 'O'
    # off-board move still passes the turn
    session = store.apply_turn('ABC', 5, 5)
    assert session is not None
    assert session.current_turn == Player('bob', 'O')


def test_strict_store_rejects_occupied_cell_silently(stub_random):
    store = GameSessionStore(rng=stub_random('alice', 'X'), strict_moves=True)
    store.start_game('ABC', ['alice', 'bob'])
    before = store.apply_turn('ABC', 0, 0)
    assert store.apply_turn('ABC', 0, 0) is None
    assert store.apply_turn('ABC', 3, 0) is None
    assert store.get('ABC') is before
    assert before.current_turn == Player('bob', 'O')


def test_strict_store_rejects_turns_after_win(stub_random):
    store = GameSessionStore(rng=stub_random('alice', 'X'), strict_moves=True)
    store.start_game('ABC', ['alice', 'bob'])
    for x, y in [(0, 0), (1, 1), (0, 1), (2, 2), (0, 2)]:
        store.apply_turn('ABC', x, y)
    assert store.get('ABC').winner == 'alice'
    assert store.apply_turn('ABC', 2, 0) is None
    assert cell_at(store.get('ABC').board, 2, 0).mark == EMPTY


def test_end_game_is_idempotent_and_blocks_turns(store):
    store.start_game('ABC', ['alice', 'bob'])
    store.end_game('ABC')
    store.end_game('ABC')
    assert store.get('ABC') is None
    assert store.apply_turn('ABC', 0, 0) is None


def test_require_raises_for_missing_session(store):
    with pytest.raises(SessionNotFound) as exc:
        store.require('ABC')
    assert exc.value.room_code == 'ABC'
    store.start_game('ABC', ['alice', 'bob'])
    assert store.require('ABC').room_code == 'ABC'


def test_rooms_are_independent(stub_random):
    store = GameSessionStore(rng=stub_random('alice', 'X', 'carol', 'O'))
    store.start_game('A', ['alice', 'bob'])
    store.start_game('B', ['carol', 'dave'])
    store.apply_turn('A', 0, 0)
    assert store.get('B').board == empty_board()
    assert store.get('B').current_turn == Player('carol', 'O')


def test_concurrent_turns_are_not_lost(stub_random):
    # every turn lands on its own cell; without atomic turns marks would vanish
    for _ in range(20):
        store = GameSessionStore(rng=stub_random('a', 'X'))
        store.start_game('R', ['a', 'b'])
        cells = [(x, y) for x in range(3) for y in range(3)]
        barrier = threading.Barrier(len(cells))

        def play(x, y):
            barrier.wait()
            store.apply_turn('R', x, y)

        threads = [threading.Thread(target=play, args=cell) for cell in cells]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        marks = [c.mark for c in store.get('R').board]
        assert EMPTY not in marks
        # turns alternated strictly: X moved first and last
        assert marks.count('X') == 5
        assert marks.count('O') == 4
