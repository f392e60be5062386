"""Net income and retirement projection."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .config import DEFAULT_POLICY, ZERO, AffordabilityPolicy

_MONTHS_PER_YEAR = Decimal(12)


@dataclass(frozen=True)
class RetirementProjection:
    years_until_retirement: int
    pre_retirement_income: Decimal
    post_retirement_income: Decimal
    total_pre_retirement_income: Decimal


def analyze_income(monthly_income: Decimal, monthly_obligations: Decimal) -> Decimal:
    """Monthly income left after fixed obligations, never negative."""
    return max(ZERO, monthly_income - monthly_obligations)


def years_until_retirement(age: int, policy: Optional[AffordabilityPolicy] = None) -> int:
    policy = policy or DEFAULT_POLICY
    return max(0, policy.retirement_age - age)


def project_retirement(
    age: int,
    net_income: Decimal,
    salary_increase_pct: Decimal,
    policy: Optional[AffordabilityPolicy] = None,
) -> RetirementProjection:
    """Project monthly income at retirement under compound salary growth.

    The lifetime total is avg(start, end) * 12 * years, a deliberate
    approximation of the geometric series rather than its exact sum.
    """
    policy = policy or DEFAULT_POLICY
    years = years_until_retirement(age, policy)

    pre = net_income
    if years > 0 and salary_increase_pct > ZERO:
        pre = net_income * (1 + Decimal(salary_increase_pct) / 100) ** years

    post = pre * policy.post_retirement_ratio
    total = (net_income + pre) / 2 * _MONTHS_PER_YEAR * years

    return RetirementProjection(
        years_until_retirement=years,
        pre_retirement_income=pre,
        post_retirement_income=post,
        total_pre_retirement_income=total,
    )
