"""
Purpose: Read order instances from CSV and summarise solutions as tables.
What it does:

- load_orders_csv(path) -> List[Order]
    Two layouts are accepted:
    * one row per order: order_id, weight[, due_date, arrival_time]
    * one row per product line: order_id, product_id, product_weight
      [, aisle, side, height_position, due_date, arrival_time];
      order weight is the sum of its product weights
- solution_frame(batches) -> DataFrame, one row per (batch, order)

Rule: Parsing and reporting only. Nothing is written to disk here.
"""

from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from .models import Batch, Order, Product

ORDER_COLUMNS = ["order_id"]
PRODUCT_COLUMNS = ["product_id", "product_weight"]


def load_orders_csv(path) -> List[Order]:
    df = pd.read_csv(path)
    return orders_from_frame(df)


def orders_from_frame(df: pd.DataFrame) -> List[Order]:
    missing = [c for c in ORDER_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in order data: {missing}")

    if all(c in df.columns for c in PRODUCT_COLUMNS):
        return _orders_from_product_lines(df)

    if "weight" not in df.columns:
        raise ValueError("Order data needs a 'weight' column or product lines (product_id, product_weight)")

    # per-column dtypes: integer ids stay int
    orders = []
    for row in df.to_dict("records"):
        orders.append(
            Order(
                id=_order_id(row["order_id"]),
                weight=float(row["weight"]),
                due_date=float(row.get("due_date", 0.0)),
                arrival_time=float(row.get("arrival_time", 0.0)),
            )
        )
    return orders


def solution_frame(batches: Sequence[Batch]) -> pd.DataFrame:
    """
    Flat view of a solution: one row per order, in picking order.
    """
    rows = []
    for batch_index, batch in enumerate(batches):
        for position, order in enumerate(batch.orders):
            rows.append({
                "batch": batch_index,
                "position": position,
                "order_id": order.id,
                "order_weight": order.weight,
                "due_date": order.due_date,
                "arrival_time": order.arrival_time,
                "batch_weight": batch.weight,
                "batch_max_weight": batch.max_weight,
                "batch_service_time": batch.service_time,
                "batch_completion_time": batch.completion_time,
            })
    columns = [
        "batch", "position", "order_id", "order_weight", "due_date", "arrival_time",
        "batch_weight", "batch_max_weight", "batch_service_time", "batch_completion_time",
    ]
    return pd.DataFrame(rows, columns=columns)


# -------------------------
# Internal helpers
# -------------------------

def _orders_from_product_lines(df: pd.DataFrame) -> List[Order]:
    orders = []
    # sort=False keeps the first-appearance order of the file
    for order_id, lines in df.groupby("order_id", sort=False):
        first = lines.iloc[0]
        products = [
            Product(
                id=int(line["product_id"]),
                aisle=int(line.get("aisle", 0)),
                side=int(line.get("side", 0)),
                height_position=float(line.get("height_position", 0.0)),
                weight=float(line["product_weight"]),
            )
            for _, line in lines.iterrows()
        ]
        orders.append(
            Order.from_products(
                _order_id(order_id),
                products,
                due_date=float(first.get("due_date", 0.0)),
                arrival_time=float(first.get("arrival_time", 0.0)),
            )
        )
    return orders


def _order_id(raw):
    # pandas hands back numpy scalars for numeric ids
    if hasattr(raw, "item"):
        raw = raw.item()
    return raw
