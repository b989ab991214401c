"""The Stock-Level transaction."""

from __future__ import annotations

from tpccbench.config import DISTRICT_PER_WAREHOUSE, Config, TpccState
from tpccbench.rand import convert_to_pq, rand_int

STOCK_LEVEL_COUNT = (
    "SELECT /*+ TIDB_INLJ(order_line,stock) */ COUNT(DISTINCT (s_i_id)) stock_count "
    "FROM order_line, stock \n"
    "WHERE ol_w_id = ? AND ol_d_id = ? AND ol_o_id < ? AND ol_o_id >= ? - 20 "
    "AND s_w_id = ? AND s_i_id = ol_i_id AND s_quantity < ?"
)
STOCK_LEVEL_SELECT_DISTRICT = "SELECT d_next_o_id FROM district WHERE d_w_id = ? AND d_id = ?"


def run_stock_level(state: TpccState, cfg: Config) -> int:
    """Count recently ordered items whose stock is below a random threshold."""
    r = state.r
    with state.transaction() as cur:
        w_id = rand_int(r, 1, cfg.warehouses)
        d_id = rand_int(r, 1, DISTRICT_PER_WAREHOUSE)
        threshold = rand_int(r, 10, 20)

        cur.execute(convert_to_pq(STOCK_LEVEL_SELECT_DISTRICT, cfg.driver), (w_id, d_id))
        row = cur.fetchone()
        if row is None:
            raise LookupError(f"district ({w_id}, {d_id}) not found")
        o_id = row[0]

        cur.execute(
            convert_to_pq(STOCK_LEVEL_COUNT, cfg.driver),
            (w_id, d_id, o_id, o_id, w_id, threshold),
        )
        return cur.fetchone()[0]