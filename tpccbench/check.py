"""Consistency conditions of the TPC-C specification, clause 3.3.2."""

from __future__ import annotations

from dataclasses import dataclass

from tpccbench.config import Config, TpccState
from tpccbench.rand import convert_to_pq


class ConsistencyError(Exception):
    """A consistency condition failed for a warehouse, or could not be evaluated."""

    def __init__(self, warehouse: int, condition: str, reason: str) -> None:
        super().__init__(
            f"check warehouse {warehouse} at condition {condition} failed {reason}"
        )
        self.warehouse = warehouse
        self.condition = condition
        self.reason = reason


@dataclass(frozen=True)
class _Condition:
    """A query whose every returned value must be zero.

    ``params`` is how many times the warehouse id is bound; ``message`` is
    formatted with ``warehouse`` and ``value`` when a non-zero value comes back.
    """

    query: str
    params: int
    message: str

    def verify(self, state: TpccState, driver: str, warehouse: int) -> None:
        with state.transaction() as cur:
            try:
                cur.execute(convert_to_pq(self.query, driver), (warehouse,) * self.params)
                rows = cur.fetchall()
            except Exception as err:
                raise RuntimeError(f"exec {self.query} failed {err}") from err
            for row in rows:
                value = float(row[0])
                if value != 0:
                    raise ValueError(self.message.format(warehouse=warehouse, value=value))


_COUNT_MESSAGE = "count(*) in warehouse {warehouse}, but got {value:f}"

_CONDITIONS: dict[str, _Condition] = {
    # W_YTD = sum(D_YTD)
    "3.3.2.1": _Condition(
        "SELECT sum(d_ytd) - max(w_ytd) diff FROM district, warehouse "
        "WHERE d_w_id = w_id AND w_id = ? group by d_w_id",
        1,
        "sum(d_ytd) - max(w_ytd) should be 0 in warehouse {warehouse}, but got {value:f}",
    ),
    # D_NEXT_O_ID - 1 = max(O_ID) = max(NO_O_ID)
    "3.3.2.2": _Condition(
        "SELECT POWER((d_next_o_id -1 - mo), 2) + POWER((d_next_o_id -1 - mno), 2) diff "
        "FROM district dis, (SELECT o_d_id,max(o_id) mo FROM orders WHERE o_w_id= ? "
        "GROUP BY o_d_id) q, (select no_d_id,max(no_o_id) mno from new_order "
        "where no_w_id= ? group by no_d_id) no where d_w_id = ? "
        "and q.o_d_id=dis.d_id and no.no_d_id=dis.d_id",
        3,
        "POWER((d_next_o_id -1 - mo), 2) + POWER((d_next_o_id -1 - mno),2) != 0 "
        "in warehouse {warehouse}, but got {value:f}",
    ),
    "3.3.2.3": _Condition(
        "SELECT max(no_o_id)-min(no_o_id)+1 - count(*) diff from new_order "
        "where no_w_id = ? group by no_d_id",
        1,
        "max(no_o_id)-min(no_o_id)+1 - count(*) in warehouse {warehouse}, but got {value:f}",
    ),
    "3.3.2.4": _Condition(
        "SELECT count(*) FROM (SELECT o_d_id, SUM(o_ol_cnt) sm1, MAX(cn) as cn FROM orders,"
        "(SELECT ol_d_id, COUNT(*) cn FROM order_line WHERE ol_w_id = ? GROUP BY ol_d_id) ol "
        "WHERE o_w_id = ? AND ol_d_id=o_d_id GROUP BY o_d_id) t1 WHERE sm1<>cn",
        2,
        _COUNT_MESSAGE,
    ),
    "3.3.2.5": _Condition(
        "SELECT count(*)  FROM orders LEFT JOIN new_order ON "
        "(no_w_id=o_w_id AND o_d_id=no_d_id AND o_id=no_o_id) where o_w_id = ? and "
        "((o_carrier_id IS NULL and no_o_id IS  NULL) OR "
        "(o_carrier_id IS NOT NULL and no_o_id IS NOT NULL  )) ",
        1,
        _COUNT_MESSAGE,
    ),
    # O_OL_CNT equals the number of order lines of the order.
    "3.3.2.6": _Condition(
        """
SELECT COUNT(*) FROM
(SELECT o_ol_cnt, order_line_count FROM orders
	LEFT JOIN (SELECT ol_w_id, ol_d_id, ol_o_id, count(*) order_line_count FROM order_line GROUP BY ol_w_id, ol_d_id, ol_o_id ORDER by ol_w_id, ol_d_id, ol_o_id) AS order_line
	ON orders.o_w_id = order_line.ol_w_id AND orders.o_d_id = order_line.ol_d_id AND orders.o_id = order_line.ol_o_id
	WHERE orders.o_w_id = ?) AS T
WHERE T.o_ol_cnt != T.order_line_count""",
        1,
        "all of O_OL_CNT - count(order_line) for the corresponding order defined by "
        "(O_W_ID, O_D_ID, O_ID) = (OL_W_ID, OL_D_ID, OL_O_ID) should be 0 "
        "in warehouse {warehouse}",
    ),
    "3.3.2.7": _Condition(
        "SELECT count(*) FROM orders, order_line WHERE o_id=ol_o_id AND o_d_id=ol_d_id "
        "AND ol_w_id=o_w_id AND o_w_id = ? AND ((ol_delivery_d IS NULL and o_carrier_id "
        "IS NOT NULL) or (o_carrier_id IS NULL and ol_delivery_d IS NOT NULL ))",
        1,
        _COUNT_MESSAGE,
    ),
    "3.3.2.8": _Condition(
        "SELECT count(*) cn FROM (SELECT w_id,w_ytd,SUM(h_amount) sm FROM history,warehouse "
        "WHERE h_w_id=w_id and w_id = ? GROUP BY w_id) t1 WHERE w_ytd<>sm",
        1,
        _COUNT_MESSAGE,
    ),
    "3.3.2.9": _Condition(
        "SELECT COUNT(*) FROM (select d_id,d_w_id,sum(d_ytd) s1 from district "
        "group by d_id,d_w_id) d,(select h_d_id,h_w_id,sum(h_amount) s2 from history "
        "WHERE  h_w_id = ? group by h_d_id, h_w_id) h WHERE h_d_id=d_id AND d_w_id=h_w_id "
        "and d_w_id= ? and s1<>s2",
        2,
        _COUNT_MESSAGE,
    ),
    "3.3.2.10": _Condition(
        """SELECT count(*) 
	FROM (  SELECT  c.c_id, c.c_d_id, c.c_w_id, c.c_balance c1, 
				   (SELECT sum(ol_amount) FROM orders, order_line 
					 WHERE OL_W_ID=O_W_ID 
					   AND OL_D_ID = O_D_ID 
					   AND OL_O_ID = O_ID 
					   AND OL_DELIVERY_D IS NOT NULL 
					   AND O_W_ID=? 
					   AND O_D_ID=c.C_D_ID 
					   AND O_C_ID=c.C_ID) sm, (SELECT  sum(h_amount)  from  history 
												WHERE H_C_W_ID=? 
												  AND H_C_D_ID=c.C_D_ID 
												  AND H_C_ID=c.C_ID) smh 
			 FROM customer c 
			WHERE  c.c_w_id = ? ) t
   WHERE c1<>sm-smh""",
        3,
        _COUNT_MESSAGE,
    ),
    # (count(*) from ORDER) - (count(*) from NEW-ORDER) = 2100 per district.
    "3.3.2.11": _Condition(
        """
SELECT count(*) FROM
	(SELECT * FROM
		(SELECT o_w_id, o_d_id, count(*) order_count FROM orders GROUP BY o_w_id, o_d_id) orders
        JOIN (SELECT no_w_id, no_d_id, count(*) new_order_count FROM new_order GROUP BY no_w_id, no_d_id) new_order
        ON orders.o_w_id = new_order.no_w_id AND orders.o_d_id = new_order.no_d_id
	) order_new_order
JOIN (SELECT c_w_id, c_d_id, count(*) customer_count FROM customer GROUP BY c_w_id, c_d_id) customer
ON order_new_order.no_w_id = customer.c_w_id AND order_new_order.no_d_id = customer.c_d_id
WHERE c_w_id = ? AND order_count - 2100 != new_order_count""",
        1,
        "all of (count(*) from ORDER) - (count(*) from NEW-ORDER) for each district "
        "defined by (O_W_ID, O_D_ID) = (NO_W_ID, NO_D_ID) = (C_W_ID, C_D_ID) "
        "should be 2100 in warehouse {warehouse}",
    ),
    "3.3.2.12": _Condition(
        """SELECT count(*) FROM (SELECT  c.c_id, c.c_d_id, c.c_balance c1, c_ytd_payment, 
		(SELECT sum(ol_amount) FROM orders, order_line 
		WHERE OL_W_ID=O_W_ID AND OL_D_ID = O_D_ID AND OL_O_ID = O_ID AND OL_DELIVERY_D IS NOT NULL AND 
		O_W_ID=? AND O_D_ID=c.C_D_ID AND O_C_ID=c.C_ID) sm FROM customer c WHERE  c.c_w_id = ?) t1 
		WHERE c1+c_ytd_payment <> sm""",
        2,
        _COUNT_MESSAGE,
    ),
}

# Condition 3.3.2.11 only holds right after loading, so it runs on request.
_OPTIONAL = frozenset({"3.3.2.11"})


def check_warehouse(state: TpccState, driver: str, warehouse: int, check_all: bool) -> None:
    """Verify the consistency conditions for one warehouse; raise ConsistencyError on failure."""
    for name, condition in _CONDITIONS.items():
        if name in _OPTIONAL and not check_all:
            continue
        print(f"begin to check warehouse {warehouse} at condition {name}")
        try:
            condition.verify(state, driver, warehouse)
        except Exception as err:
            raise ConsistencyError(warehouse, name, str(err)) from err


def run_checks(state: TpccState, cfg: Config, thread_id: int, check_all: bool) -> None:
    """Check every warehouse that falls to this thread."""
    for i in range(thread_id % cfg.threads, cfg.warehouses, cfg.threads):
        check_warehouse(state, cfg.driver, i % cfg.warehouses + 1, check_all)