# tpccbench

Building blocks for running TPC-C against a SQL database: the random-data
rules of the specification, the initial population of the nine tables, a
batched loader that writes it, the five transactions (New-Order, Payment,
Order-Status, Delivery, Stock-Level) and the consistency conditions of
clause 3.3.2.

Everything talks to the database through a DB-API 2.0 connection that you
open yourself. Queries are written with `?` placeholders. When
`Config.driver` is `"postgres"` they are rewritten to `$1`, `$2`, … by
`tpccbench.rand.convert_to_pq`; for any other driver they are sent as they
are, so the connection has to accept `?` placeholders.

## Installing

```
pip install tpccbench
```

## Using it

Each worker thread owns a `TpccState`: its connection, its random generator
(`state.r`) and any file loaders. `state.transaction()` yields a cursor,
commits when the block ends and rolls back if it raises; `state.close()`
closes the connection.

```python
from datetime import datetime

from tpccbench.check import run_checks
from tpccbench.config import TIME_FORMAT, Config, TpccState
from tpccbench.delivery import run_delivery
from tpccbench.new_order import run_new_order
from tpccbench.order_status import run_order_status
from tpccbench.payment import run_payment
from tpccbench.prepare import prepare_workload
from tpccbench.sql_loader import SQLLoader
from tpccbench.stock_level import run_stock_level

cfg = Config(driver="postgres", db_name="tpcc", threads=1, warehouses=1)
state = TpccState(conn=open_connection())  # any DB-API 2.0 connection
try:
    loader = SQLLoader(state, cfg, datetime.now().strftime(TIME_FORMAT))
    prepare_workload(loader, cfg.threads, cfg.warehouses, thread_id=0)
    run_checks(state, cfg, thread_id=0, check_all=True)

    run_new_order(state, cfg)     # dict, or None when rolled back on purpose
    run_payment(state, cfg)       # dict
    run_order_status(state, cfg)  # dict
    run_delivery(state, cfg)      # dict
    run_stock_level(state, cfg)   # int: the stock count

    run_checks(state, cfg, thread_id=0, check_all=cfg.check_all)
finally:
    state.close()
```

### Modules

- `tpccbench.config` — `Config`, `PartitionType`, `TpccState` and the table
  names and sizes (`MAX_ITEMS`, `CUSTOMER_PER_DISTRICT`, …).
- `tpccbench.rand` — `rand_int`, `rand_chars`, `rand_letters`,
  `rand_numbers`, `rand_zip`, `rand_state`, `rand_tax`,
  `rand_original_string`, `rand_c_last`, `rand_c_last_syllables`,
  `rand_customer_id`, `rand_item_id` and `convert_to_pq`.
- `tpccbench.load` — generators of the initial rows of each table
  (`item_rows`, `warehouse_row`, `stock_rows`, `district_rows`,
  `customer_rows`, `history_rows`, `order_rows`, `new_order_rows`,
  `order_line_rows`) and the INSERT prefix of each table in `INSERT_HINTS`.
- `tpccbench.sql_loader` — `SQLSink` writes rows as multi-row INSERTs in
  batches of 1024, retrying a failed batch `retry_count` times with
  `retry_interval` seconds between tries; `SQLLoader` loads each table
  through it.
- `tpccbench.prepare` — `prepare_workload` shares warehouses and districts
  out between threads (thread 0 also loads the item table) and raises
  `LoadError` naming the table that failed. Any object with the methods of
  the `TpccLoader` protocol can be passed to it.
- `tpccbench.new_order`, `tpccbench.payment`, `tpccbench.order_status`,
  `tpccbench.delivery`, `tpccbench.stock_level` — one function per
  transaction, each run in a single database transaction.
- `tpccbench.check` — `check_warehouse` and `run_checks` evaluate the
  conditions 3.3.2.1 to 3.3.2.12 and raise `ConsistencyError` at the first
  one that fails. Condition 3.3.2.11 only runs when `check_all` is true.

## What it does not do

- It does not create or drop the tables. The schema must already exist
  before `prepare_workload` loads data.
- It does not pick transactions from a weighted mix, simulate keying and
  thinking times, or measure and report latencies and tpmC. Calling the
  transaction functions, in whatever proportion and timing you want, is up
  to you. `Config.weight`, `Config.wait` and the output settings are held
  but not acted on by any module here.
- It does not write the initial data to CSV files; `SQLLoader` writes to
  the database only.
- It has no command-line program.

## Running the tests

```
pip install tpccbench[test]
pytest
```