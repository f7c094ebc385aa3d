"""
Budget model: immutable snapshots handed to the document core.

Field names on the wire are the camelCase names the budget form sends;
Python attributes are snake_case. Every field is optional: blank text
stays blank (the assembler renders a placeholder), and malformed numeric
input is coerced to 0 the same way the form does it.
"""

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .labels import HELPER_ROLE, UNITS

Language = Literal["es", "en"]
DocumentFormat = Literal["docx", "pdf"]


def coerce_number(value) -> float:
    """Anything that isn't a finite number becomes 0, the same as the budget form."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def coerce_text(value) -> str:
    """null text is blank text, so it renders as the placeholder."""
    return "" if value is None else value


class BudgetModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ProjectInfo(BudgetModel):
    project_name: str = ""
    beneficiary: str = ""
    approver_name: str = ""
    approval_date: str = ""
    observations: str = ""

    @field_validator("project_name", "beneficiary", "approver_name", "approval_date", "observations", mode="before")
    @classmethod
    def _text(cls, v):
        return coerce_text(v)


class WorkerInfo(BudgetModel):
    id: str = ""
    name: str = ""
    role: str = HELPER_ROLE

    @field_validator("id", "name", "role", mode="before")
    @classmethod
    def _text(cls, v):
        return coerce_text(v)


class MaterialItem(BudgetModel):
    id: str = ""
    description: str = ""
    quantity: float = 0.0
    unit: str = UNITS[0]["value"]
    unit_price: float = 0.0

    @field_validator("id", "description", "unit", mode="before")
    @classmethod
    def _text(cls, v):
        return coerce_text(v)

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def _coerce(cls, v):
        return coerce_number(v)


class LaborItem(BudgetModel):
    id: str = ""
    description: str = ""
    cost: float = 0.0

    @field_validator("id", "description", mode="before")
    @classmethod
    def _text(cls, v):
        return coerce_text(v)

    @field_validator("cost", mode="before")
    @classmethod
    def _coerce(cls, v):
        return coerce_number(v)


class DietInfo(BudgetModel):
    workers_count: float = 0
    days: float = 0
    cost_per_day: float = 0.0

    @field_validator("workers_count", "days", "cost_per_day", mode="before")
    @classmethod
    def _coerce(cls, v):
        return coerce_number(v)


class Totals(BudgetModel):
    materials_total: float = 0.0
    labor_total: float = 0.0
    diet_total: float = 0.0
    grand_total: float = 0.0


class Budget(BudgetModel):
    """The combined budget model for one project."""
    project: ProjectInfo = Field(default_factory=ProjectInfo)
    workers: tuple[WorkerInfo, ...] = ()
    materials: tuple[MaterialItem, ...] = ()
    labor: tuple[LaborItem, ...] = ()
    diet: DietInfo = Field(default_factory=DietInfo)

    @field_validator("workers", "materials", "labor", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return () if v is None else v

    @field_validator("project", "diet", mode="before")
    @classmethod
    def _none_is_default(cls, v):
        return {} if v is None else v


class UnitOption(BaseModel):
    value: str
    label: str
