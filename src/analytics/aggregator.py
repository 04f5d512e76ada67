"""Category aggregation and peer comparison.

Everything here is a pure function over already-fetched records: inputs are
never mutated and each call returns fresh containers.

Rounding follows ``round_half_up`` (``floor(x + 0.5)``), so 2.5 rounds to 3
and -2.5 rounds to -2.
"""

import math
from typing import Dict, Iterable, List, Mapping, Tuple

from analytics.models import CategoryComparison, CategorySpend
from receipts.models import ExpenseRecord
from shared.validators import DEFAULT_CATEGORY


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def category_totals(records: Iterable[ExpenseRecord]) -> Dict[str, float]:
    """Sum line-item prices per category, in order of first occurrence."""
    totals: Dict[str, float] = {}
    for record in records:
        for item in record.items:
            category = item.category or DEFAULT_CATEGORY
            totals[category] = totals.get(category, 0.0) + item.price
    return totals


def spending_breakdown(records: Iterable[ExpenseRecord]) -> List[CategorySpend]:
    """
    Category totals with their share of the grand total.

    Args:
        records: Expense records to aggregate

    Returns:
        One entry per category; every percentage is 0 when the grand total is 0
    """
    totals = category_totals(records)
    grand_total = sum(totals.values())

    return [
        CategorySpend(
            name=name,
            amount=amount,
            percentage=round_half_up(amount / grand_total * 100) if grand_total > 0 else 0
        )
        for name, amount in totals.items()
    ]


def population_totals(
    records: Iterable[ExpenseRecord]
) -> Tuple[Dict[str, float], Dict[str, int]]:
    """
    Category totals across all owners plus distinct contributing owners.

    Args:
        records: Expense records of any number of owners

    Returns:
        (totals per category, number of distinct owners per category)
    """
    totals: Dict[str, float] = {}
    owners: Dict[str, set] = {}

    for record in records:
        for item in record.items:
            category = item.category or DEFAULT_CATEGORY
            totals[category] = totals.get(category, 0.0) + item.price
            owners.setdefault(category, set()).add(record.google_id)

    return totals, {category: len(ids) for category, ids in owners.items()}


def peer_averages(
    totals: Mapping[str, float],
    contributing_owners: Mapping[str, int]
) -> Dict[str, float]:
    """Average spend per contributing owner; 0 when nobody contributed."""
    averages = {}
    for category, total in totals.items():
        count = contributing_owners.get(category, 0)
        averages[category] = total / count if count > 0 else 0.0
    return averages


def compare_to_peers(
    owner_totals: Mapping[str, float],
    totals: Mapping[str, float],
    contributing_owners: Mapping[str, int]
) -> List[CategoryComparison]:
    """
    Compare one owner's category spend with the peer average.

    Categories are the union of both sides, the owner's first. A side that
    lacks a category counts as 0.

    Args:
        owner_totals: The owner's totals per category
        totals: Population totals per category
        contributing_owners: Distinct owners per category in the population

    Returns:
        One comparison per category
    """
    averages = peer_averages(totals, contributing_owners)

    categories = list(owner_totals)
    categories.extend(category for category in averages if category not in owner_totals)

    comparison = []
    for category in categories:
        diff = round_half_up(owner_totals.get(category, 0.0) - averages.get(category, 0.0))
        comparison.append(
            CategoryComparison(
                category=category,
                difference=abs(diff),
                is_higher=diff > 0
            )
        )

    return comparison
