"""Initial population of the TPC-C tables, shared out between threads."""

from __future__ import annotations

from typing import Protocol

from tpccbench.config import DISTRICT_PER_WAREHOUSE


class LoadError(Exception):
    """Loading one part of the initial data failed."""


class TpccLoader(Protocol):
    """Something that writes the initial rows of each table."""

    def load_item(self) -> None:
        """Write the item table."""

    def load_warehouse(self, warehouse: int) -> None:
        """Write one warehouse row."""

    def load_stock(self, warehouse: int) -> None:
        """Write the stock of one warehouse."""

    def load_district(self, warehouse: int) -> None:
        """Write the districts of one warehouse."""

    def load_customer(self, warehouse: int, district: int) -> None:
        """Write the customers of one district."""

    def load_history(self, warehouse: int, district: int) -> None:
        """Write the history rows of one district."""

    def load_order(self, warehouse: int, district: int) -> list[int]:
        """Write the orders of one district; return each order's line count."""

    def load_new_order(self, warehouse: int, district: int) -> None:
        """Write the outstanding new orders of one district."""

    def load_order_line(self, warehouse: int, district: int, ol_cnts: list[int]) -> None:
        """Write the order lines of one district."""


def prepare_workload(loader: TpccLoader, threads: int, warehouses: int, thread_id: int) -> None:
    """Load this thread's share of warehouses and districts; thread 0 also loads items."""
    if thread_id == 0:
        try:
            loader.load_item()
        except Exception as err:
            raise LoadError(f"load item failed {err}") from err

    for i in range(thread_id % threads, warehouses, threads):
        warehouse = i % warehouses + 1
        steps = (
            ("warehouse", loader.load_warehouse),
            ("stock", loader.load_stock),
            ("district", loader.load_district),
        )
        for table, load in steps:
            try:
                load(warehouse)
            except Exception as err:
                raise LoadError(f"load {table} at warehouse {warehouse} failed {err}") from err

    districts = warehouses * DISTRICT_PER_WAREHOUSE
    for i in range(thread_id % threads, districts, threads):
        warehouse = (i // DISTRICT_PER_WAREHOUSE) % warehouses + 1
        district = i % DISTRICT_PER_WAREHOUSE + 1
        table = "customer"
        try:
            loader.load_customer(warehouse, district)
            table = "history"
            loader.load_history(warehouse, district)
            table = "orders"
            ol_cnts = loader.load_order(warehouse, district)
            table = "new_order"
            loader.load_new_order(warehouse, district)
            table = "order_line"
            loader.load_order_line(warehouse, district, ol_cnts)
        except Exception as err:
            raise LoadError(
                f"load {table} at warehouse {warehouse} district {district} failed {err}"
            ) from err