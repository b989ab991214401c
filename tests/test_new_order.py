import random

import pytest

from tpccbench.config import Config, TpccState
from tpccbench.new_order import (
    INSERT_ORDER,
    UPDATE_DISTRICT,
    UPDATE_STOCK,
    insert_order_line_sql,
    other_warehouse,
    run_new_order,
    select_items_sql,
    select_stock_sql,
)


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self._rows = []

    def execute(self, query, params=()):
        self.conn.executed.append((query, tuple(params)))
        self._rows = list(self.conn.handler(query, tuple(params)))

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, handler):
        self.handler = handler
        self.executed = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        pass

    def queries(self, prefix):
        return [(q, p) for q, p in self.executed if q.startswith(prefix)]


def make_handler(stock_quantity=100, drop_first_item=False, stock_rows=True, keep_unused=False):
    def handler(query, params):
        if query.startswith("SELECT c_discount"):
            return [(0.0, "BARBARBAR", "GC", 0.0)]
        if query.startswith("SELECT d_next_o_id"):
            return [(3001, 0.0)]
        if query.startswith("SELECT i_price"):
            ids = list(params)
            if drop_first_item:
                ids = ids[1:]
            return [(10.0, "name", "data", i) for i in ids if i > 0 or keep_unused]
        if query.startswith("SELECT s_i_id"):
            if not stock_rows:
                return []
            ids = params[1::2]
            dists = tuple(f"dist-{k}" for k in range(1, 11))
            return [(i, stock_quantity, "sdata", *dists) for i in ids]
        return []

    return handler


def make_state(handler, seed=1):
    return TpccState(conn=FakeConnection(handler), r=random.Random(seed))


def test_select_items_sql_placeholders():
    query = select_items_sql(5)
    assert query.startswith("SELECT i_price, i_name, i_data, i_id FROM item WHERE i_id IN (")
    assert query.count("?") == 5
    assert query.endswith(")")


def test_select_stock_sql_pairs():
    query = select_stock_sql(7)
    assert query.count("(?,?)") == 7
    assert query.endswith(") FOR UPDATE")


def test_insert_order_line_sql_groups():
    query = insert_order_line_sql(3)
    assert query.count("(?,?,?,?,?,?,?,?,?)") == 3
    assert query.count("?") == 27


def test_generated_sql_rejects_empty():
    with pytest.raises(ValueError):
        select_items_sql(0)


def test_other_warehouse_single():
    assert other_warehouse(random.Random(3), 1, 1) == 1


@pytest.mark.parametrize("seed", range(20))
def test_other_warehouse_differs(seed):
    other = other_warehouse(random.Random(seed), 4, 2)
    assert other != 2
    assert 1 <= other <= 4


def test_successful_order_writes_lines():
    for seed in range(30):
        state = make_state(make_handler(), seed)
        result = run_new_order(state, Config(warehouses=1))
        if result is None:
            continue
        conn = state.conn
        assert conn.commits == 1
        assert result["order_id"] == 3001
        (line_query, line_params), = conn.queries("INSERT into order_line")
        assert line_params.count(3001) >= len(result["lines"])
        assert len(line_params) == 9 * len(result["lines"])
        (_, district_params), = conn.queries(UPDATE_DISTRICT[:20])
        assert district_params[0] == 3001
        d_id = district_params[1]
        for k in range(len(result["lines"])):
            row = line_params[9 * k: 9 * k + 9]
            assert row[3] == k + 1
            assert row[7] == pytest.approx(row[6] * 10.0)
            assert row[8] == f"dist-{d_id}"
        return
    pytest.fail("no successful order in 30 seeds")


def test_stock_quantity_above_threshold():
    state = make_state(make_handler(stock_quantity=100), 5)
    result = run_new_order(state, Config(warehouses=1))
    assert result is not None or state.conn.rollbacks == 1
    quantities = {line[1]: line[3] for line in (result or {"lines": []})["lines"]}
    for _, params in state.conn.queries(UPDATE_STOCK[:20]):
        assert params[0] == 100 - quantities[params[3]]
        assert params[1] == quantities[params[3]]


def test_stock_quantity_wraps_below_ten():
    state = make_state(make_handler(stock_quantity=10), 6)
    result = run_new_order(state, Config(warehouses=1))
    assert result is not None or state.conn.rollbacks == 1
    for _, params in state.conn.queries(UPDATE_STOCK[:20]):
        assert params[0] == 101 - params[1]


def test_unused_item_rolls_back():
    rolled_back = 0
    for seed in range(1000):
        state = make_state(make_handler(), seed)
        result = run_new_order(state, Config(warehouses=1))
        if result is None:
            rolled_back += 1
            assert state.conn.rollbacks == 1
            assert state.conn.commits == 0
            assert not state.conn.queries("INSERT into order_line")
    assert rolled_back > 0


def test_missing_item_raises():
    state = make_state(make_handler(drop_first_item=True), 2)
    with pytest.raises(LookupError, match="not found"):
        run_new_order(state, Config(warehouses=1))
    assert state.conn.rollbacks == 1


def test_missing_stock_raises():
    state = make_state(make_handler(stock_rows=False, keep_unused=True), 2)
    with pytest.raises(LookupError, match="not found in stock"):
        run_new_order(state, Config(warehouses=1))


def test_missing_customer_raises():
    state = make_state(lambda query, params: [], 2)
    with pytest.raises(LookupError):
        run_new_order(state, Config(warehouses=1))


def test_postgres_placeholders():
    state = make_state(make_handler(), 4)
    run_new_order(state, Config(warehouses=1, driver="postgres"))
    (query, params), = state.conn.queries(INSERT_ORDER[:18])
    assert "?" not in query
    assert "$7" in query
    assert len(params) == 7


def test_remote_supply_sets_all_local():
    for seed in range(300):
        state = make_state(make_handler(), seed)
        result = run_new_order(state, Config(warehouses=5))
        if result is None:
            continue
        remote = [line for line in result["lines"] if line[2] != result["warehouse_id"]]
        assert result["all_local"] == (0 if remote else 1)