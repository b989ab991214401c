"""Benchmark configuration, shared constants and per-thread state."""

from __future__ import annotations

import random
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterator

MAX_ITEMS = 100_000
STOCK_PER_WAREHOUSE = 100_000
DISTRICT_PER_WAREHOUSE = 10
CUSTOMER_PER_DISTRICT = 3000
ORDER_PER_DISTRICT = 3000
NEW_ORDER_PER_DISTRICT = 900

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

TABLE_ITEM = "item"
TABLE_CUSTOMER = "customer"
TABLE_DISTRICT = "district"
TABLE_ORDERS = "orders"
TABLE_NEW_ORDER = "new_order"
TABLE_ORDER_LINE = "order_line"
TABLE_HISTORY = "history"
TABLE_WAREHOUSE = "warehouse"
TABLE_STOCK = "stock"
TABLE_GROUP_NAME = "tpcc_group"

TABLES = (
    TABLE_ITEM,
    TABLE_CUSTOMER,
    TABLE_DISTRICT,
    TABLE_HISTORY,
    TABLE_NEW_ORDER,
    TABLE_ORDER_LINE,
    TABLE_ORDERS,
    TABLE_STOCK,
    TABLE_WAREHOUSE,
)


class PartitionType(IntEnum):
    """How the warehouse-keyed tables are partitioned."""

    HASH = 1
    RANGE = 2
    LIST_AS_HASH = 3
    LIST_AS_RANGE = 4


@dataclass
class Config:
    """Settings of a TPC-C run."""

    driver: str = "mysql"
    db_name: str = "test"
    threads: int = 1
    parts: int = 1
    partition_type: PartitionType = PartitionType.HASH
    warehouses: int = 10
    use_fk: bool = False
    isolation: int = 0
    check_all: bool = False
    no_check: bool = False
    # Weights for new_order, payment, order_status, delivery, stock_level.
    weight: list[int] = field(default_factory=list)
    # Whether keying and thinking times are simulated.
    wait: bool = False
    max_measure_latency: float = 16.0
    output_type: str = ""
    output_dir: str = ""
    specified_tables: str = ""
    use_clustered_index: bool = True
    prepare_retry_count: int = 0
    prepare_retry_interval: float = 0.0
    output_style: str = "plain"
    conn_refresh_interval: float = 0.0


@dataclass
class TpccState:
    """Everything one worker thread owns: its connection, generator and deck."""

    conn: Any
    r: random.Random = field(default_factory=random.Random)
    index: int = 0
    decks: list[int] = field(default_factory=list)
    loaders: dict[str, Any] = field(default_factory=dict)
    last_conn_refresh: float = field(default_factory=time.monotonic)

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Yield a cursor; commit when the block ends, roll back if it raises."""
        cursor = self.conn.cursor()
        try:
            yield cursor
        except BaseException:
            self.conn.rollback()
            raise
        else:
            self.conn.commit()
        finally:
            cursor.close()

    def close(self) -> None:
        """Close the connection and every file loader of this thread."""
        if self.conn is not None:
            self.conn.close()
        for loader in self.loaders.values():
            loader.close()