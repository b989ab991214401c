"""Generators of the initial rows of each TPC-C table."""

from __future__ import annotations

import random
from typing import Any, Iterator

from tpccbench.config import (
    CUSTOMER_PER_DISTRICT,
    DISTRICT_PER_WAREHOUSE,
    MAX_ITEMS,
    NEW_ORDER_PER_DISTRICT,
    ORDER_PER_DISTRICT,
    STOCK_PER_WAREHOUSE,
    TABLE_CUSTOMER,
    TABLE_DISTRICT,
    TABLE_HISTORY,
    TABLE_ITEM,
    TABLE_NEW_ORDER,
    TABLE_ORDER_LINE,
    TABLE_ORDERS,
    TABLE_STOCK,
    TABLE_WAREHOUSE,
)
from tpccbench.rand import (
    rand_c_last,
    rand_c_last_syllables,
    rand_chars,
    rand_int,
    rand_letters,
    rand_numbers,
    rand_original_string,
    rand_state,
    rand_tax,
    rand_zip,
)

Row = tuple[Any, ...]

# Orders below this id are already delivered when the database is loaded.
FIRST_UNDELIVERED_ORDER = 2101

INSERT_HINTS = {
    TABLE_ITEM: "INSERT INTO item (i_id, i_im_id, i_name, i_price, i_data) VALUES ",
    TABLE_WAREHOUSE: (
        "INSERT INTO warehouse (w_id, w_name, w_street_1, w_street_2, w_city, "
        "w_state, w_zip, w_tax, w_ytd) VALUES "
    ),
    TABLE_STOCK: (
        "INSERT INTO stock (s_i_id, s_w_id, s_quantity, \n"
        "s_dist_01, s_dist_02, s_dist_03, s_dist_04, s_dist_05, s_dist_06, \n"
        "s_dist_07, s_dist_08, s_dist_09, s_dist_10, s_ytd, s_order_cnt, "
        "s_remote_cnt, s_data) VALUES "
    ),
    TABLE_DISTRICT: (
        "INSERT INTO district (d_id, d_w_id, d_name, d_street_1, d_street_2, \n"
        "d_city, d_state, d_zip, d_tax, d_ytd, d_next_o_id) VALUES "
    ),
    TABLE_CUSTOMER: (
        "INSERT INTO customer (c_id, c_d_id, c_w_id, c_first, c_middle, c_last, \n"
        "c_street_1, c_street_2, c_city, c_state, c_zip, c_phone, c_since, c_credit, "
        "c_credit_lim,\n"
        "c_discount, c_balance, c_ytd_payment, c_payment_cnt, c_delivery_cnt, c_data) VALUES "
    ),
    TABLE_HISTORY: (
        "INSERT INTO history (h_c_id, h_c_d_id, h_c_w_id, h_d_id, h_w_id, h_date, "
        "h_amount, h_data) VALUES "
    ),
    TABLE_ORDERS: (
        "INSERT INTO orders (o_id, o_d_id, o_w_id, o_c_id, o_entry_d, \n"
        "o_carrier_id, o_ol_cnt, o_all_local) VALUES "
    ),
    TABLE_NEW_ORDER: "INSERT INTO new_order (no_o_id, no_d_id, no_w_id) VALUES ",
    TABLE_ORDER_LINE: (
        "INSERT INTO order_line (ol_o_id, ol_d_id, ol_w_id, ol_number,\n"
        "ol_i_id, ol_supply_w_id, ol_delivery_d, ol_quantity, ol_amount, "
        "ol_dist_info) VALUES "
    ),
}

# Position of o_ol_cnt in a row of order_rows().
ORDER_OL_CNT_COLUMN = 6


def item_rows(r: random.Random) -> Iterator[Row]:
    """Yield the item table: (i_id, i_im_id, i_name, i_price, i_data)."""
    for i_id in range(1, MAX_ITEMS + 1):
        im_id = rand_int(r, 1, 10000)
        price = rand_int(r, 100, 10000) / 100.0
        name = rand_chars(r, 14, 24)
        data = rand_original_string(r)
        yield (i_id, im_id, name, price, data)


def warehouse_row(r: random.Random, warehouse: int) -> Row:
    """The single row of one warehouse."""
    name = rand_chars(r, 6, 10)
    street1 = rand_chars(r, 10, 20)
    street2 = rand_chars(r, 10, 20)
    city = rand_chars(r, 10, 20)
    state = rand_state(r)
    zip_code = rand_zip(r)
    tax = rand_tax(r)
    return (warehouse, name, street1, street2, city, state, zip_code, tax, 300000.00)


def stock_rows(r: random.Random, warehouse: int) -> Iterator[Row]:
    """Yield the stock of one warehouse, one row per item."""
    for i_id in range(1, STOCK_PER_WAREHOUSE + 1):
        quantity = rand_int(r, 10, 100)
        dists = tuple(rand_letters(r, 24, 24) for _ in range(10))
        data = rand_original_string(r)
        yield (i_id, warehouse, quantity, *dists, 0, 0, 0, data)


def district_rows(r: random.Random, warehouse: int) -> Iterator[Row]:
    """Yield the districts of one warehouse."""
    for d_id in range(1, DISTRICT_PER_WAREHOUSE + 1):
        name = rand_chars(r, 6, 10)
        street1 = rand_chars(r, 10, 20)
        street2 = rand_chars(r, 10, 20)
        city = rand_chars(r, 10, 20)
        state = rand_state(r)
        zip_code = rand_zip(r)
        tax = rand_tax(r)
        yield (d_id, warehouse, name, street1, street2, city, state, zip_code, tax,
               30000.00, 3001)


def customer_rows(r: random.Random, warehouse: int, district: int, since: str) -> Iterator[Row]:
    """Yield the customers of one district; the first 1000 get sequential last names."""
    for i in range(CUSTOMER_PER_DISTRICT):
        last = rand_c_last_syllables(i) if i < 1000 else rand_c_last(r)
        first = rand_chars(r, 8, 16)
        street1 = rand_chars(r, 10, 20)
        street2 = rand_chars(r, 10, 20)
        city = rand_chars(r, 10, 20)
        state = rand_state(r)
        zip_code = rand_zip(r)
        phone = rand_numbers(r, 16, 16)
        credit = "BC" if r.randrange(10) == 0 else "GC"
        discount = rand_int(r, 0, 5000) / 10000.0
        data = rand_chars(r, 300, 500)
        yield (
            i + 1, district, warehouse, first, "OE", last, street1, street2, city, state,
            zip_code, phone, since, credit, 50000.00, discount, -10.00,
            10.00, 1, 0, data,
        )


def history_rows(r: random.Random, warehouse: int, district: int, date: str) -> Iterator[Row]:
    """Yield one history row per customer of a district."""
    for c_id in range(1, CUSTOMER_PER_DISTRICT + 1):
        data = rand_chars(r, 12, 24)
        yield (c_id, district, warehouse, district, warehouse, date, 10.00, data)


def order_rows(r: random.Random, warehouse: int, district: int, entry_date: str) -> list[Row]:
    """The orders of one district, one per customer in random order.

    Each row's line count sits at ORDER_OL_CNT_COLUMN; undelivered orders
    have no carrier (None).
    """
    customer_ids = list(range(ORDER_PER_DISTRICT))
    r.shuffle(customer_ids)
    rows = []
    for o_id, c_index in enumerate(customer_ids, start=1):
        carrier = rand_int(r, 1, 10) if o_id < FIRST_UNDELIVERED_ORDER else None
        ol_cnt = rand_int(r, 5, 15)
        rows.append((o_id, district, warehouse, c_index + 1, entry_date, carrier, ol_cnt, 1))
    return rows


def new_order_rows(warehouse: int, district: int) -> Iterator[Row]:
    """Yield the outstanding new orders: the last 900 orders of a district."""
    for i in range(NEW_ORDER_PER_DISTRICT):
        yield (FIRST_UNDELIVERED_ORDER + i, district, warehouse)


def order_line_rows(
    r: random.Random,
    warehouse: int,
    district: int,
    ol_cnts: list[int],
    delivery_date: str,
) -> Iterator[Row]:
    """Yield the order lines of a district, ol_cnts[i] lines for order i + 1."""
    for o_id, count in enumerate(ol_cnts, start=1):
        for number in range(1, count + 1):
            i_id = rand_int(r, 1, 100000)
            if o_id < FIRST_UNDELIVERED_ORDER:
                delivered, amount = delivery_date, 0.00
            else:
                delivered, amount = None, rand_int(r, 1, 999999) / 100.0
            dist_info = rand_chars(r, 24, 24)
            yield (o_id, district, warehouse, number, i_id, warehouse,
                   delivered, 5, amount, dist_info)