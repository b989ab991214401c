"""The Delivery transaction."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from tpccbench.config import DISTRICT_PER_WAREHOUSE, TIME_FORMAT, Config, TpccState
from tpccbench.rand import convert_to_pq, rand_int

_TEN_KEYS = "(?,?,?),(?,?,?),(?,?,?),(?,?,?),(?,?,?),(?,?,?),(?,?,?),(?,?,?),(?,?,?),(?,?,?)"

SELECT_NEW_ORDER = (
    "SELECT no_o_id FROM new_order WHERE no_w_id = ? AND no_d_id = ? "
    "ORDER BY no_o_id ASC LIMIT 1 FOR UPDATE"
)
DELETE_NEW_ORDER = (
    f"DELETE FROM new_order WHERE (no_w_id, no_d_id, no_o_id) IN (\n\t{_TEN_KEYS}\n)"
)
UPDATE_ORDER = (
    f"UPDATE orders SET o_carrier_id = ? WHERE (o_w_id, o_d_id, o_id) IN (\n\t{_TEN_KEYS}\n)"
)
SELECT_ORDERS = (
    f"SELECT o_d_id, o_c_id FROM orders WHERE (o_w_id, o_d_id, o_id) IN (\n\t{_TEN_KEYS}\n)"
)
UPDATE_ORDER_LINE = (
    "UPDATE order_line SET ol_delivery_d = ? WHERE (ol_w_id, ol_d_id, ol_o_id) IN "
    f"(\n\t{_TEN_KEYS}\n)"
)
SELECT_SUM_AMOUNT = (
    "SELECT ol_d_id, SUM(ol_amount) FROM order_line WHERE (ol_w_id, ol_d_id, ol_o_id) IN "
    f"(\n\t{_TEN_KEYS}\n) GROUP BY ol_d_id"
)
UPDATE_CUSTOMER = (
    "UPDATE customer SET c_balance = c_balance + ?, c_delivery_cnt = c_delivery_cnt + 1 "
    "WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"
)


@dataclass
class _DeliveryOrder:
    o_id: int = 0
    c_id: int = 0
    amount: float = 0.0


def run_delivery(state: TpccState, cfg: Config) -> dict[str, Any]:
    """Deliver the oldest outstanding order of every district of a random warehouse.

    Districts without an outstanding order are skipped. Returns the warehouse,
    the carrier and one (district, order, customer, amount) tuple per delivery.
    """
    r = state.r
    w_id = rand_int(r, 1, cfg.warehouses)
    carrier_id = rand_int(r, 1, 10)
    orders = [_DeliveryOrder() for _ in range(DISTRICT_PER_WAREHOUSE)]

    with state.transaction() as cur:

        def execute(query: str, params: tuple[Any, ...]) -> list[Any]:
            try:
                cur.execute(convert_to_pq(query, cfg.driver), params)
                if query.lstrip().upper().startswith("SELECT"):
                    return list(cur.fetchall())
                return []
            except Exception as err:
                raise RuntimeError(f"exec {query} failed {err}") from err

        for d_id, order in enumerate(orders, start=1):
            rows = execute(SELECT_NEW_ORDER, (w_id, d_id))
            if rows:
                order.o_id = int(rows[0][0])

        keys = tuple(
            value
            for d_id, order in enumerate(orders, start=1)
            for value in (w_id, d_id, order.o_id)
        )

        execute(DELETE_NEW_ORDER, keys)
        execute(UPDATE_ORDER, (carrier_id, *keys))

        for d_id, c_id in execute(SELECT_ORDERS, keys):
            orders[int(d_id) - 1].c_id = int(c_id)

        execute(UPDATE_ORDER_LINE, (datetime.now().strftime(TIME_FORMAT), *keys))

        for d_id, amount in execute(SELECT_SUM_AMOUNT, keys):
            orders[int(d_id) - 1].amount = float(amount)

        for d_id, order in enumerate(orders, start=1):
            if order.o_id == 0:
                continue
            execute(UPDATE_CUSTOMER, (order.amount, w_id, d_id, order.c_id))

    return {
        "warehouse_id": w_id,
        "carrier_id": carrier_id,
        "delivered": [
            (d_id, order.o_id, order.c_id, order.amount)
            for d_id, order in enumerate(orders, start=1)
            if order.o_id != 0
        ],
    }