"""The Order-Status transaction."""

from __future__ import annotations

from typing import Any

from tpccbench.config import DISTRICT_PER_WAREHOUSE, Config, TpccState
from tpccbench.rand import convert_to_pq, rand_c_last, rand_customer_id, rand_int

SELECT_CUSTOMER_CNT_BY_LAST = (
    "SELECT count(c_id) namecnt FROM customer WHERE c_w_id = ? AND c_d_id = ? AND c_last = ?"
)
SELECT_CUSTOMER_BY_LAST = (
    "SELECT c_balance, c_first, c_middle, c_id FROM customer "
    "WHERE c_w_id = ? AND c_d_id = ? AND c_last = ? ORDER BY c_first"
)
SELECT_CUSTOMER_BY_ID = (
    "SELECT c_balance, c_first, c_middle, c_last FROM customer "
    "WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"
)
SELECT_LATEST_ORDER = (
    "SELECT o_id, o_carrier_id, o_entry_d FROM orders "
    "WHERE o_w_id = ? AND o_d_id = ? AND o_c_id = ? ORDER BY o_id DESC LIMIT 1"
)
SELECT_ORDER_LINE = (
    "SELECT ol_i_id, ol_supply_w_id, ol_quantity, ol_amount, ol_delivery_d FROM order_line "
    "WHERE ol_w_id = ? AND ol_d_id = ? AND ol_o_id = ?"
)


def run_order_status(state: TpccState, cfg: Config) -> dict[str, Any]:
    """Look up a customer's latest order and its lines."""
    r = state.r
    w_id = rand_int(r, 1, cfg.warehouses)
    d_id = rand_int(r, 1, DISTRICT_PER_WAREHOUSE)
    c_id = 0
    c_last = ""
    # 60% by last name, 40% by customer id.
    if r.randrange(100) < 60:
        c_last = rand_c_last(r)
    else:
        c_id = rand_customer_id(r)

    def sql(query: str) -> str:
        return convert_to_pq(query, cfg.driver)

    balance, first, middle = 0.0, "", ""
    with state.transaction() as cur:
        if c_id == 0:
            cur.execute(sql(SELECT_CUSTOMER_CNT_BY_LAST), (w_id, d_id, c_last))
            name_cnt = cur.fetchone()[0]
            if name_cnt % 2 == 1:
                name_cnt += 1
            cur.execute(sql(SELECT_CUSTOMER_BY_LAST), (w_id, d_id, c_last))
            chosen = cur.fetchall()[: name_cnt // 2]
            if chosen:
                balance, first, middle, c_id = chosen[-1]
        else:
            cur.execute(sql(SELECT_CUSTOMER_BY_ID), (w_id, d_id, c_id))
            row = cur.fetchone()
            if row is None:
                raise LookupError(f"customer ({w_id}, {d_id}, {c_id}) not found")
            balance, first, middle, c_last = row

        cur.execute(sql(SELECT_LATEST_ORDER), (w_id, d_id, c_id))
        order = cur.fetchone()
        if order is None:
            raise LookupError(f"no order found for customer ({w_id}, {d_id}, {c_id})")
        o_id, carrier_id, entry_date = order

        cur.execute(sql(SELECT_ORDER_LINE), (w_id, d_id, o_id))
        lines = [tuple(line) for line in cur.fetchall()]

    return {
        "warehouse_id": w_id,
        "district_id": d_id,
        "customer_id": c_id,
        "first": first,
        "middle": middle,
        "last": c_last,
        "balance": balance,
        "order_id": o_id,
        "carrier_id": carrier_id,
        "entry_date": entry_date,
        "lines": lines,
    }