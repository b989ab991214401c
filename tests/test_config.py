import sqlite3

import pytest

from tpccbench.config import Config, TpccState


@pytest.fixture
def state():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE t (v INTEGER)")
    conn.commit()
    return TpccState(conn=conn)


def _count(conn):
    return conn.execute("SELECT count(*) FROM t").fetchone()[0]


def test_transaction_commits(state):
    with state.transaction() as cur:
        cur.execute("INSERT INTO t (v) VALUES (?)", (7,))
    state.conn.rollback()
    assert _count(state.conn) == 1


def test_transaction_rolls_back_on_error(state):
    with pytest.raises(RuntimeError):
        with state.transaction() as cur:
            cur.execute("INSERT INTO t (v) VALUES (?)", (7,))
            raise RuntimeError("boom")
    assert _count(state.conn) == 0


class _Loader:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def test_close_closes_connection_and_loaders(state):
    loaders = {"item": _Loader(), "stock": _Loader()}
    state.loaders = loaders
    state.close()
    assert all(loader.closed for loader in loaders.values())
    with pytest.raises(sqlite3.ProgrammingError):
        state.conn.execute("SELECT 1")


def test_config_weights_are_independent():
    first = Config()
    second = Config()
    first.weight.append(45)
    assert second.weight == []


def test_states_have_separate_decks(state):
    other = TpccState(conn=None)
    state.decks.append(1)
    assert other.decks == []