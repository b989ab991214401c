"""Loading the initial data into the database through batched INSERTs."""

from __future__ import annotations

import time
from typing import Any, Iterable

from tpccbench.config import (
    TABLE_CUSTOMER,
    TABLE_DISTRICT,
    TABLE_HISTORY,
    TABLE_ITEM,
    TABLE_NEW_ORDER,
    TABLE_ORDER_LINE,
    TABLE_ORDERS,
    TABLE_STOCK,
    TABLE_WAREHOUSE,
    Config,
    TpccState,
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
from tpccbench.rand import convert_to_pq


class SQLSink:
    """Collects rows and writes them as multi-row INSERT statements."""

    BATCH_SIZE = 1024

    def __init__(
        self,
        state: TpccState,
        hint: str,
        driver: str,
        retry_count: int,
        retry_interval: float,
    ) -> None:
        self.state = state
        self.hint = hint
        self.driver = driver
        self.retry_count = retry_count
        self.retry_interval = retry_interval
        self.batch_size = self.BATCH_SIZE
        self._rows: list[tuple[Any, ...]] = []

    def write_row(self, *args: Any) -> None:
        """Queue one row; a full batch is written at once."""
        self._rows.append(args)
        if len(self._rows) >= self.batch_size:
            self.flush()

    def write_rows(self, rows: Iterable[tuple[Any, ...]]) -> None:
        """Queue many rows."""
        for row in rows:
            self.write_row(*row)

    def flush(self) -> None:
        """Write the queued rows, retrying failed attempts as configured."""
        if not self._rows:
            return
        rows, self._rows = self._rows, []
        group = "(" + ",".join("?" * len(rows[0])) + ")"
        query = convert_to_pq(self.hint + ",".join([group] * len(rows)), self.driver)
        params = tuple(value for row in rows for value in row)

        attempt = 0
        while True:
            try:
                with self.state.transaction() as cur:
                    cur.execute(query, params)
                return
            except Exception:
                if attempt >= self.retry_count:
                    raise
                attempt += 1
                time.sleep(self.retry_interval)


class SQLLoader:
    """Writes the initial TPC-C data of one thread into the database."""

    def __init__(self, state: TpccState, cfg: Config, init_load_time: str) -> None:
        self.state = state
        self.cfg = cfg
        self.init_load_time = init_load_time

    def _sink(self, table: str) -> SQLSink:
        return SQLSink(
            self.state,
            INSERT_HINTS[table],
            self.cfg.driver,
            self.cfg.prepare_retry_count,
            self.cfg.prepare_retry_interval,
        )

    def _load(self, table: str, rows: Iterable[tuple[Any, ...]]) -> None:
        sink = self._sink(table)
        sink.write_rows(rows)
        sink.flush()

    def load_item(self) -> None:
        """Write the item table."""
        print("load to item")
        self._load(TABLE_ITEM, item_rows(self.state.r))

    def load_warehouse(self, warehouse: int) -> None:
        """Write one warehouse row."""
        print(f"load to warehouse in warehouse {warehouse}")
        self._load(TABLE_WAREHOUSE, [warehouse_row(self.state.r, warehouse)])

    def load_stock(self, warehouse: int) -> None:
        """Write the stock of one warehouse."""
        print(f"load to stock in warehouse {warehouse}")
        self._load(TABLE_STOCK, stock_rows(self.state.r, warehouse))

    def load_district(self, warehouse: int) -> None:
        """Write the districts of one warehouse."""
        print(f"load to district in warehouse {warehouse}")
        self._load(TABLE_DISTRICT, district_rows(self.state.r, warehouse))

    def load_customer(self, warehouse: int, district: int) -> None:
        """Write the customers of one district."""
        print(f"load to customer in warehouse {warehouse} district {district}")
        self._load(
            TABLE_CUSTOMER,
            customer_rows(self.state.r, warehouse, district, self.init_load_time),
        )

    def load_history(self, warehouse: int, district: int) -> None:
        """Write the history rows of one district."""
        print(f"load to history in warehouse {warehouse} district {district}")
        self._load(
            TABLE_HISTORY,
            history_rows(self.state.r, warehouse, district, self.init_load_time),
        )

    def load_order(self, warehouse: int, district: int) -> list[int]:
        """Write the orders of one district; return each order's line count."""
        print(f"load to orders in warehouse {warehouse} district {district}")
        rows = order_rows(self.state.r, warehouse, district, self.init_load_time)
        self._load(TABLE_ORDERS, rows)
        return [row[ORDER_OL_CNT_COLUMN] for row in rows]

    def load_new_order(self, warehouse: int, district: int) -> None:
        """Write the outstanding new orders of one district."""
        print(f"load to new_order in warehouse {warehouse} district {district}")
        self._load(TABLE_NEW_ORDER, new_order_rows(warehouse, district))

    def load_order_line(self, warehouse: int, district: int, ol_cnts: list[int]) -> None:
        """Write the order lines of one district."""
        print(f"load to order_line in warehouse {warehouse} district {district}")
        self._load(
            TABLE_ORDER_LINE,
            order_line_rows(self.state.r, warehouse, district, ol_cnts, self.init_load_time),
        )