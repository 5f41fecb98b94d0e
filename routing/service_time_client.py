#Purpose: HTTP adapter for a remote service-time (routing) service.
#Sole responsibility: send the contents of a batch to the service and
#return the picking duration it computes.
#Encapsulates service-specific details:
#payload shape (orders -> product locations)
#URL construction (/service-time/v1/{profile})
#timeouts and error handling
#parsing the JSON response
#It does not plan routes itself and holds no batching rules.

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Dict, Optional

import requests
from dotenv import load_dotenv

from .oracle import OracleError

if TYPE_CHECKING:
    from orders.models import Batch

# Read the routing service base URL from environment
# Example in .env:
# ROUTING_BASE_URL=http://localhost:5000
load_dotenv()

logger = logging.getLogger(__name__)


class RoutingServiceClient:
    """
    Remote service-time oracle.

    Instances are callable (batch -> seconds), so they can be passed
    wherever a ServiceTimeOracle is expected.
    """

    def __init__(self, base_url: Optional[str] = None, profile: str = "combined", timeout: int = 5):
        self.base_url = base_url or os.getenv("ROUTING_BASE_URL")
        self.profile = profile  # routing policy the service should apply (s_shape, largest_gap, ...)
        self.timeout = timeout  # seconds to wait before giving up

        if not self.base_url:
            raise ValueError("Routing service base URL not set. Please set ROUTING_BASE_URL in the .env file.")

    def build_payload(self, batch: "Batch") -> Dict[str, Any]:
        """Batch -> JSON body: every order with its product locations."""
        return {
            "orders": [
                {
                    "id": order.id,
                    "products": [
                        {
                            "id": product.id,
                            "aisle": product.aisle,
                            "side": product.side,
                            "height_position": product.height_position,
                        }
                        for product in order.products
                    ],
                }
                for order in batch.orders
            ]
        }

    def compute_service_time(self, batch: "Batch") -> float:
        """
        Calls the service-time endpoint for one batch.

        Returns:
            service time (float, same unit the service is configured with)
        """
        url = f"{self.base_url.rstrip('/')}/service-time/v1/{self.profile}"

        try:
            response = requests.post(url, json=self.build_payload(batch), timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("routing service request failed for batch %s: %s", batch.order_ids, exc)
            raise OracleError(f"Routing service request failed: {exc}") from exc

        if not isinstance(data, dict):
            raise OracleError(f"Malformed routing service response: {data!r}")

        if data.get("code") != "Ok":
            raise OracleError(f"Routing service error: {data.get('message', 'Unknown error')}")

        try:
            return float(data["service_time"])
        except (KeyError, TypeError, ValueError) as exc:
            raise OracleError(f"Malformed routing service response: {data!r}") from exc

    def __call__(self, batch: "Batch") -> float:
        return self.compute_service_time(batch)
