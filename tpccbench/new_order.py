"""The New-Order transaction."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any

from tpccbench.config import DISTRICT_PER_WAREHOUSE, TIME_FORMAT, Config, TpccState
from tpccbench.rand import convert_to_pq, rand_customer_id, rand_int, rand_item_id

SELECT_CUSTOMER = (
    "SELECT c_discount, c_last, c_credit, w_tax FROM customer, warehouse "
    "WHERE w_id = ? AND c_w_id = w_id AND c_d_id = ? AND c_id = ?"
)
SELECT_DISTRICT = "SELECT d_next_o_id, d_tax FROM district WHERE d_id = ? AND d_w_id = ? FOR UPDATE"
UPDATE_DISTRICT = "UPDATE district SET d_next_o_id = ? + 1 WHERE d_id = ? AND d_w_id = ?"
INSERT_ORDER = (
    "INSERT INTO orders (o_id, o_d_id, o_w_id, o_c_id, o_entry_d, o_ol_cnt, o_all_local) "
    "VALUES (?, ?, ?, ?, ?, ?, ?)"
)
INSERT_NEW_ORDER = "INSERT INTO new_order (no_o_id, no_d_id, no_w_id) VALUES (?, ?, ?)"
UPDATE_STOCK = (
    "UPDATE stock SET s_quantity = ?, s_ytd = s_ytd + ?, s_order_cnt = s_order_cnt + 1, "
    "s_remote_cnt = s_remote_cnt + ? WHERE s_i_id = ? AND s_w_id = ?"
)

_SELECT_ITEMS_PREFIX = "SELECT i_price, i_name, i_data, i_id FROM item WHERE i_id IN ("
_SELECT_STOCK_PREFIX = (
    "SELECT s_i_id, s_quantity, s_data, s_dist_01, s_dist_02, s_dist_03, s_dist_04, "
    "s_dist_05, s_dist_06, s_dist_07, s_dist_08, s_dist_09, s_dist_10 FROM stock "
    "WHERE (s_w_id, s_i_id) IN ("
)
_INSERT_ORDER_LINE_PREFIX = (
    "INSERT into order_line (ol_o_id, ol_d_id, ol_w_id, ol_number, ol_i_id, "
    "ol_supply_w_id, ol_quantity, ol_amount, ol_dist_info) VALUES "
)

# Item id used on purpose to make the transaction roll back (clause 2.4.1.4).
_UNUSED_ITEM_ID = -1


def _check_count(count: int) -> None:
    if count < 1:
        raise ValueError(f"statement needs at least one row, got {count}")


@lru_cache(maxsize=None)
def select_items_sql(count: int) -> str:
    """SELECT of `count` items by id."""
    _check_count(count)
    return _SELECT_ITEMS_PREFIX + ",".join(["?"] * count) + ")"


@lru_cache(maxsize=None)
def select_stock_sql(count: int) -> str:
    """Locking SELECT of `count` stock rows by (warehouse, item)."""
    _check_count(count)
    return _SELECT_STOCK_PREFIX + ",".join(["(?,?)"] * count) + ") FOR UPDATE"


@lru_cache(maxsize=None)
def insert_order_line_sql(count: int) -> str:
    """INSERT of `count` order lines in one statement."""
    _check_count(count)
    return _INSERT_ORDER_LINE_PREFIX + ",".join(["(?,?,?,?,?,?,?,?,?)"] * count)


def other_warehouse(r: random.Random, warehouses: int, warehouse: int) -> int:
    """A random warehouse other than `warehouse`, or itself when there is only one."""
    if warehouses == 1:
        return warehouse
    while True:
        other = rand_int(r, 1, warehouses)
        if other != warehouse:
            return other


class _Rollback(Exception):
    """Raised inside the transaction to undo it without reporting an error."""


@dataclass
class _OrderItem:
    number: int
    item_id: int
    supply_w_id: int = 0
    quantity: int = 0
    remote: int = 0
    price: float = 0.0
    name: str = ""
    data: str = ""
    found_in_items: bool = False
    found_in_stock: bool = False
    stock_quantity: int = 0
    dist: str = ""
    amount: float = 0.0


def run_new_order(state: TpccState, cfg: Config) -> dict[str, Any] | None:
    """Enter a new order; return its details, or None when it was rolled back on purpose."""
    r = state.r
    w_id = rand_int(r, 1, cfg.warehouses)
    d_id = rand_int(r, 1, DISTRICT_PER_WAREHOUSE)
    c_id = rand_customer_id(r)
    ol_cnt = rand_int(r, 5, 15)

    rbk = rand_int(r, 1, 100)
    all_local = 1
    items: list[_OrderItem] = []
    by_id: dict[int, _OrderItem] = {}

    for number in range(1, ol_cnt + 1):
        if number == ol_cnt and rbk == 1:
            item_id = _UNUSED_ITEM_ID
        else:
            item_id = rand_item_id(r)
            while item_id in by_id:
                item_id = rand_item_id(r)
        item = _OrderItem(number, item_id)
        by_id[item_id] = item
        items.append(item)

        if cfg.warehouses == 1 or rand_int(r, 1, 100) != 1:
            item.supply_w_id = w_id
        else:
            item.supply_w_id = other_warehouse(r, cfg.warehouses, w_id)
            item.remote = 1
            all_local = 0

        item.quantity = rand_int(r, 1, 10)

    def sql(query: str) -> str:
        return convert_to_pq(query, cfg.driver)

    try:
        with state.transaction() as cur:
            cur.execute(sql(SELECT_CUSTOMER), (w_id, d_id, c_id))
            row = cur.fetchone()
            if row is None:
                raise LookupError(f"customer (wID={w_id},dID={d_id},cID={c_id}) not found")
            discount, c_last, c_credit, w_tax = row
            discount, w_tax = float(discount), float(w_tax)

            cur.execute(sql(SELECT_DISTRICT), (d_id, w_id))
            row = cur.fetchone()
            if row is None:
                raise LookupError(f"district ({w_id}, {d_id}) not found")
            next_o_id, d_tax = int(row[0]), float(row[1])

            cur.execute(sql(UPDATE_DISTRICT), (next_o_id, d_id, w_id))
            o_id = next_o_id
            now = datetime.now().strftime(TIME_FORMAT)
            cur.execute(sql(INSERT_ORDER), (o_id, d_id, w_id, c_id, now, ol_cnt, all_local))
            cur.execute(sql(INSERT_NEW_ORDER), (o_id, d_id, w_id))

            cur.execute(
                sql(select_items_sql(len(items))), tuple(item.item_id for item in items)
            )
            for price, name, data, i_id in cur.fetchall():
                found = by_id.get(i_id)
                if found is None:
                    continue
                found.price, found.name, found.data = float(price), name, data
                found.found_in_items = True
            for item in items:
                if not item.found_in_items:
                    if item.item_id == _UNUSED_ITEM_ID:
                        raise _Rollback
                    raise LookupError(f"item {item.item_id} not found")

            stock_params = tuple(v for item in items for v in (w_id, item.item_id))
            cur.execute(sql(select_stock_sql(len(items))), stock_params)
            for i_id, quantity, _s_data, *dists in cur.fetchall():
                found = by_id.get(i_id)
                if found is None:
                    continue
                quantity = int(quantity) - found.quantity
                if quantity < 10:
                    quantity += 91
                found.found_in_stock = True
                found.stock_quantity = quantity
                found.dist = dists[d_id - 1]
                found.amount = (
                    found.quantity * found.price * (1 + w_tax + d_tax) * (1 - discount)
                )

            for item in items:
                if not item.found_in_stock:
                    raise LookupError(f"item ({w_id}, {item.item_id}) not found in stock")
                if item.item_id < 0:
                    raise _Rollback
                cur.execute(
                    sql(UPDATE_STOCK),
                    (item.stock_quantity, item.quantity, item.remote, item.item_id, w_id),
                )

            line_params = tuple(
                value
                for item in items
                for value in (
                    o_id, d_id, w_id, item.number, item.item_id,
                    item.supply_w_id, item.quantity, item.amount, item.dist,
                )
            )
            cur.execute(sql(insert_order_line_sql(len(items))), line_params)
    except _Rollback:
        return None

    return {
        "warehouse_id": w_id,
        "district_id": d_id,
        "customer_id": c_id,
        "last": c_last,
        "credit": c_credit,
        "order_id": o_id,
        "all_local": all_local,
        "entry_date": now,
        "lines": [
            (item.number, item.item_id, item.supply_w_id, item.quantity, item.amount)
            for item in items
        ],
    }