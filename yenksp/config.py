"""Configuration classes for yenksp components."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class KspConfig:
    """Configuration for shortest-path and k-shortest-path searches."""

    # Edge attribute holding the traversal weight
    cost_attr: str = "cost"

    # Absolute tolerance used when comparing path costs against a bound
    cost_tolerance: float = 1e-9

    # Number of paths the generator yields when max_k is not given (None = all)
    max_k_default: Optional[int] = None

    def within_bound(self, cost: float, bound: float) -> bool:
        """Return True if `cost` does not exceed `bound` beyond the tolerance."""
        return cost <= bound + self.cost_tolerance


# Global configuration instance
KSP_CONFIG = KspConfig()
