#Marks routing as a package.
#Re-exports the oracle contract and the remote oracle client so other
#modules import from routing without knowing internal file names.
#No business logic.

from .oracle import CheckedServiceTimeOracle, OracleError, ServiceTimeOracle, checked_oracle
from .service_time_client import RoutingServiceClient

__all__ = [
    "ServiceTimeOracle",
    "OracleError",
    "CheckedServiceTimeOracle",
    "checked_oracle",
    "RoutingServiceClient",
]
