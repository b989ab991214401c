"""The Payment transaction."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from tpccbench.config import DISTRICT_PER_WAREHOUSE, TIME_FORMAT, Config, TpccState
from tpccbench.new_order import other_warehouse
from tpccbench.rand import convert_to_pq, rand_c_last, rand_customer_id, rand_int

UPDATE_DISTRICT = "UPDATE district SET d_ytd = d_ytd + ? WHERE d_w_id = ? AND d_id = ?"
SELECT_DISTRICT = (
    "SELECT d_street_1, d_street_2, d_city, d_state, d_zip, d_name FROM district "
    "WHERE d_w_id = ? AND d_id = ?"
)
UPDATE_WAREHOUSE = "UPDATE warehouse SET w_ytd = w_ytd + ? WHERE w_id = ?"
SELECT_WAREHOUSE = (
    "SELECT w_street_1, w_street_2, w_city, w_state, w_zip, w_name FROM warehouse WHERE w_id = ?"
)
SELECT_CUSTOMER_LIST_BY_LAST = (
    "SELECT c_id FROM customer WHERE c_w_id = ? AND c_d_id = ? AND c_last = ? ORDER BY c_first"
)
SELECT_CUSTOMER_FOR_UPDATE = (
    "SELECT c_first, c_middle, c_last, c_street_1, c_street_2, c_city, c_state, c_zip, c_phone,\n"
    "c_credit, c_credit_lim, c_discount, c_balance, c_since FROM customer "
    "WHERE c_w_id = ? AND c_d_id = ? \nAND c_id = ? FOR UPDATE"
)
UPDATE_CUSTOMER = (
    "UPDATE customer SET c_balance = c_balance - ?, c_ytd_payment = c_ytd_payment + ?, \n"
    "c_payment_cnt = c_payment_cnt + 1 WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"
)
SELECT_CUSTOMER_DATA = "SELECT c_data FROM customer WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"
UPDATE_CUSTOMER_WITH_DATA = (
    "UPDATE customer SET c_balance = c_balance - ?, c_ytd_payment = c_ytd_payment + ?, \n"
    "c_payment_cnt = c_payment_cnt + 1, c_data = ? WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"
)
INSERT_HISTORY = (
    "INSERT INTO history (h_c_d_id, h_c_w_id, h_c_id, h_d_id, h_w_id, h_date, h_amount, h_data)\n"
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
)

C_DATA_LENGTH = 500


def build_bad_credit_data(
    c_id: int,
    c_d_id: int,
    c_w_id: int,
    d_id: int,
    w_id: int,
    amount: float,
    now: str,
    c_data: str,
) -> str:
    """The new c_data of a bad-credit customer: payment details, then the old data, 500 chars at most."""
    new_data = (
        f"| {c_id:4d} {c_d_id:2d} {c_w_id:4d} {d_id:2d} {w_id:4d} "
        f"${amount:7.2f} {now:>12} {c_data:>24}"
    )
    if len(new_data) >= C_DATA_LENGTH:
        return new_data[:C_DATA_LENGTH]
    return new_data + c_data[: C_DATA_LENGTH - len(new_data)]


def run_payment(state: TpccState, cfg: Config) -> dict[str, Any]:
    """Record a customer payment; return the customer and amount involved."""
    r = state.r
    w_id = rand_int(r, 1, cfg.warehouses)
    d_id = rand_int(r, 1, DISTRICT_PER_WAREHOUSE)
    amount = rand_int(r, 100, 500000) / 100.0

    c_id = 0
    c_last = ""
    # 60% by last name, 40% by customer id.
    if r.randrange(100) < 60:
        c_last = rand_c_last(r)
    else:
        c_id = rand_customer_id(r)

    # 85% paid at the home warehouse, 15% at a remote one.
    if cfg.warehouses == 1 or r.randrange(100) < 85:
        c_w_id, c_d_id = w_id, d_id
    else:
        c_w_id = other_warehouse(r, cfg.warehouses, w_id)
        c_d_id = rand_int(r, 1, DISTRICT_PER_WAREHOUSE)

    def sql(query: str) -> str:
        return convert_to_pq(query, cfg.driver)

    with state.transaction() as cur:
        cur.execute(sql(UPDATE_DISTRICT), (amount, w_id, d_id))

        cur.execute(sql(SELECT_DISTRICT), (w_id, d_id))
        row = cur.fetchone()
        if row is None:
            raise LookupError(f"district ({w_id}, {d_id}) not found")
        d_name = row[5]

        cur.execute(sql(UPDATE_WAREHOUSE), (amount, w_id))

        cur.execute(sql(SELECT_WAREHOUSE), (w_id,))
        row = cur.fetchone()
        if row is None:
            raise LookupError(f"warehouse {w_id} not found")
        w_name = row[5]

        if c_id == 0:
            cur.execute(sql(SELECT_CUSTOMER_LIST_BY_LAST), (c_w_id, c_d_id, c_last))
            ids = [found[0] for found in cur.fetchall()]
            if not ids:
                raise LookupError(f"customer for ({c_w_id}, {c_d_id}, {c_last}) not found")
            c_id = ids[(len(ids) + 1) // 2 - 1]

        cur.execute(sql(SELECT_CUSTOMER_FOR_UPDATE), (c_w_id, c_d_id, c_id))
        row = cur.fetchone()
        if row is None:
            raise LookupError(f"customer ({c_w_id}, {c_d_id}, {c_id}) not found")
        first, middle, c_last = row[0], row[1], row[2]
        credit = row[9]
        balance = row[12]

        if credit == "BC":
            cur.execute(sql(SELECT_CUSTOMER_DATA), (c_w_id, c_d_id, c_id))
            row = cur.fetchone()
            if row is None:
                raise LookupError(f"customer ({c_w_id}, {c_d_id}, {c_id}) has no data")
            new_data = build_bad_credit_data(
                c_id, c_d_id, c_w_id, d_id, w_id, amount,
                datetime.now().strftime(TIME_FORMAT), row[0],
            )
            cur.execute(
                sql(UPDATE_CUSTOMER_WITH_DATA),
                (amount, amount, new_data, c_w_id, c_d_id, c_id),
            )
        else:
            cur.execute(sql(UPDATE_CUSTOMER), (amount, amount, c_w_id, c_d_id, c_id))

        h_data = f"{w_name:>10}    {d_name:>10}"
        cur.execute(
            sql(INSERT_HISTORY),
            (c_d_id, c_w_id, c_id, d_id, w_id, datetime.now().strftime(TIME_FORMAT),
             amount, h_data),
        )

    return {
        "warehouse_id": w_id,
        "district_id": d_id,
        "customer_warehouse_id": c_w_id,
        "customer_district_id": c_d_id,
        "customer_id": c_id,
        "first": first,
        "middle": middle,
        "last": c_last,
        "credit": credit,
        "balance": balance,
        "amount": amount,
    }