import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def exponential_arrival_times(num_orders, time_horizon, seed=50):
    """
    Arrival times with exponential inter-arrival gaps whose mean spreads
    `num_orders` arrivals over `time_horizon`.
    """
    np.random.seed(seed)
    gaps = np.round(np.random.exponential(scale=time_horizon / num_orders, size=num_orders))
    return np.cumsum(gaps)


def generate_mock_orders(
    num_orders=100,
    num_aisles=10,
    aisle_depth=30,
    max_lines_per_order=5,
    time_horizon=3600,
    due_date_slack=(600, 3600),
    seed=50,
    output_file="orders_generated.csv",
):
    """
    Generates a product-line order dataset for the batching heuristics.
    One row per (order, product) so the loader builds the products and sums
    the order weight. Popular products sit in the first aisles (ABC layout)
    so batches overlap in aisles and the savings heuristic has something to find.
    """
    arrivals = exponential_arrival_times(num_orders, time_horizon, seed=seed)

    num_products = num_aisles * aisle_depth
    popularity = 1.0 / np.arange(1, num_products + 1)
    popularity = popularity / popularity.sum()

    data = []
    for order_index in range(num_orders):
        arrival = float(arrivals[order_index])
        due_date = arrival + np.random.randint(*due_date_slack)
        num_lines = np.random.randint(1, max_lines_per_order + 1)
        products = np.random.choice(num_products, size=num_lines, replace=False, p=popularity)

        for product_id in products:
            data.append({
                "order_id": order_index + 1,
                "product_id": int(product_id),
                "aisle": int(product_id) // aisle_depth,
                "side": int(product_id) % 2,
                "height_position": np.round(np.random.uniform(0.0, 2.0), 2),
                "product_weight": np.round(np.random.uniform(0.5, 8.0), 1),
                "due_date": due_date,
                "arrival_time": arrival,
            })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    logger.info("Generated %d orders (%d product lines) and saved to '%s'", num_orders, len(df), output_file)

    # Quick preview of how heavy the orders are
    weights = df.groupby("order_id")["product_weight"].sum()
    logger.info("Order weight: mean %.1f, max %.1f", weights.mean(), weights.max())
    return df


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    generate_mock_orders(num_orders=200, num_aisles=12)
