import random
from itertools import islice

import pytest

from tpccbench.config import (
    CUSTOMER_PER_DISTRICT,
    DISTRICT_PER_WAREHOUSE,
    NEW_ORDER_PER_DISTRICT,
    ORDER_PER_DISTRICT,
)
from tpccbench.load import (
    INSERT_HINTS,
    ORDER_OL_CNT_COLUMN,
    customer_rows,
    district_rows,
    history_rows,
    item_rows,
    new_order_rows,
    order_line_rows,
    order_rows,
    stock_rows,
    warehouse_row,
)
from tpccbench.rand import rand_c_last_syllables

DATE = "2024-01-02 03:04:05"


@pytest.fixture
def r():
    return random.Random(42)


def test_item_rows(r):
    rows = list(islice(item_rows(r), 200))
    assert [row[0] for row in rows] == list(range(1, 201))
    for _, im_id, name, price, data in rows:
        assert 1 <= im_id <= 10000
        assert 14 <= len(name) <= 24
        assert 1.0 <= price <= 100.0
        assert 26 <= len(data) <= 50


def test_item_rows_are_reproducible():
    a = list(islice(item_rows(random.Random(7)), 20))
    b = list(islice(item_rows(random.Random(7)), 20))
    assert a == b


def test_warehouse_row(r):
    row = warehouse_row(r, 3)
    assert row[0] == 3
    assert len(row) == 9
    assert row[-1] == 300000.00
    assert row[6].endswith("11111")
    assert 0.0 <= row[7] <= 0.2


def test_stock_rows(r):
    rows = list(islice(stock_rows(r, 2), 50))
    for i_id, row in enumerate(rows, start=1):
        assert row[0] == i_id
        assert row[1] == 2
        assert 10 <= row[2] <= 100
        assert all(len(d) == 24 and d.isupper() for d in row[3:13])
        assert row[13:16] == (0, 0, 0)
        assert len(row) == 17


def test_district_rows(r):
    rows = list(district_rows(r, 5))
    assert len(rows) == DISTRICT_PER_WAREHOUSE
    assert [row[0] for row in rows] == list(range(1, DISTRICT_PER_WAREHOUSE + 1))
    assert all(row[1] == 5 and row[9] == 30000.00 and row[10] == 3001 for row in rows)


def test_customer_rows(r):
    rows = list(customer_rows(r, 1, 4, DATE))
    assert len(rows) == CUSTOMER_PER_DISTRICT
    for i, row in enumerate(rows):
        assert row[0] == i + 1
        assert row[1:3] == (4, 1)
        assert row[4] == "OE"
        if i < 1000:
            assert row[5] == rand_c_last_syllables(i)
        assert row[12] == DATE
        assert row[13] in ("GC", "BC")
        assert 0.0 <= row[15] <= 0.5
        assert 300 <= len(row[20]) <= 500
        assert len(row[11]) == 16 and row[11].isdigit()


def test_history_rows(r):
    rows = list(history_rows(r, 2, 3, DATE))
    assert len(rows) == CUSTOMER_PER_DISTRICT
    assert all(row[1:6] == (3, 2, 3, 2, DATE) and row[6] == 10.00 for row in rows)


def test_order_rows(r):
    rows = order_rows(r, 1, 2, DATE)
    assert len(rows) == ORDER_PER_DISTRICT
    assert sorted(row[3] for row in rows) == list(range(1, ORDER_PER_DISTRICT + 1))
    for row in rows:
        assert 5 <= row[ORDER_OL_CNT_COLUMN] <= 15
        if row[0] < 2101:
            assert 1 <= row[5] <= 10
        else:
            assert row[5] is None


def test_new_order_rows():
    rows = list(new_order_rows(7, 8))
    assert len(rows) == NEW_ORDER_PER_DISTRICT
    assert rows[0] == (2101, 8, 7)
    assert rows[-1][0] == ORDER_PER_DISTRICT


def test_order_line_rows(r):
    ol_cnts = [1] * 2100 + [3, 2]
    rows = list(order_line_rows(r, 4, 6, ol_cnts, DATE))
    assert len(rows) == sum(ol_cnts)
    for row in rows:
        assert row[1:3] == (6, 4)
        assert row[5] == 4
        assert row[7] == 5
        assert len(row[9]) == 24
        if row[0] < 2101:
            assert row[6] == DATE and row[8] == 0.0
        else:
            assert row[6] is None and 0.01 <= row[8] <= 9999.99
    assert [row[3] for row in rows if row[0] == 2101] == [1, 2, 3]


def test_insert_hints_end_with_values():
    assert all(hint.endswith(" VALUES ") for hint in INSERT_HINTS.values())
    assert INSERT_HINTS["new_order"] == "INSERT INTO new_order (no_o_id, no_d_id, no_w_id) VALUES "