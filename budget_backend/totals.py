"""
Totals engine: pure math, no rounding.

quantity × unit price per material line, sum of labor costs,
workers × days × cost per day for meals. Rounding to cents happens only
when a value is displayed.
"""

from typing import Iterable

from .schemas import DietInfo, LaborItem, MaterialItem, Totals


def line_total(item: MaterialItem) -> float:
    """quantity × unit price for one material line."""
    return item.quantity * item.unit_price


def materials_total(materials: Iterable[MaterialItem]) -> float:
    """Sum of all material line totals."""
    return sum((line_total(m) for m in materials), 0.0)


def labor_total(labor: Iterable[LaborItem]) -> float:
    """Sum of labor costs."""
    return sum((item.cost for item in labor), 0.0)


def diet_total(diet: DietInfo) -> float:
    """workers × days × cost per day."""
    return diet.workers_count * diet.days * diet.cost_per_day


def compute_totals(materials, labor, diet: DietInfo) -> Totals:
    mat = materials_total(materials)
    lab = labor_total(labor)
    meals = diet_total(diet)
    return Totals(
        materials_total=mat,
        labor_total=lab,
        diet_total=meals,
        grand_total=mat + lab + meals,
    )
