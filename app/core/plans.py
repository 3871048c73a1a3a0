"""
Premium plan catalog.

The catalog is built once at import time and exposed read-only. Handlers
receive it through the ``get_plan_catalog`` dependency.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from app.exceptions import UnknownPlanError
from app.models.plan import Plan


class PlanCatalog:
    """Immutable lookup table of premium plans keyed by plan id"""

    def __init__(self, plans: Iterable[Plan]):
        self._plans: Mapping[str, Plan] = MappingProxyType({plan.key: plan for plan in plans})

    def get(self, key: str | None) -> Plan:
        """Resolve a plan key, failing loudly on unknown keys"""
        if key is None or key not in self._plans:
            raise UnknownPlanError(key)
        return self._plans[key]

    def __contains__(self, key: object) -> bool:
        return key in self._plans

    def __iter__(self):
        return iter(self._plans.values())

    def __len__(self) -> int:
        return len(self._plans)


PLANS = PlanCatalog(
    [
        Plan(key="basic", name="Basic", price=49900, valid=30),
        Plan(key="standard", name="Standard", price=99900, valid=90),
        Plan(key="premium", name="Premium", price=179900, valid=180),
    ]
)


def get_plan_catalog() -> PlanCatalog:
    """Dependency returning the process-wide plan catalog"""
    return PLANS
