"""Coercion of raw calculator form/JSON values into a UsageInput.

Form fields arrive as strings (or are missing). Numbers are read by their
leading numeric prefix; anything unreadable, non-finite or negative counts
as 0. Household size defaults to 1 and region to "other".
"""
from __future__ import annotations

from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from carbon_models import Region, UsageInput
from common.formatters import parse_leading_float, parse_leading_int


class CalculatorForm(BaseModel):
    """Calculator submission. Accepts snake_case or camelCase keys."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    electricity: float = 0.0
    natural_gas: float = Field(
        0.0, validation_alias=AliasChoices("natural_gas", "naturalGas"),
    )
    water: float = 0.0
    waste: float = 0.0
    transportation: float = 0.0
    household_size: int = Field(
        1, validation_alias=AliasChoices("household_size", "householdSize"),
    )
    region: Region = Region.OTHER

    @field_validator(
        "electricity", "natural_gas", "water", "waste", "transportation",
        mode="before",
    )
    @classmethod
    def _coerce_quantity(cls, value: Any) -> float:
        parsed = parse_leading_float(value)
        if parsed is None or parsed < 0:
            return 0.0
        return parsed

    @field_validator("household_size", mode="before")
    @classmethod
    def _coerce_household_size(cls, value: Any) -> int:
        parsed = parse_leading_int(value)
        if parsed is None or parsed < 1:
            return 1
        return parsed

    @field_validator("region", mode="before")
    @classmethod
    def _coerce_region(cls, value: Any) -> Region:
        return Region.parse(value)

    def to_usage_input(self) -> UsageInput:
        return UsageInput(
            electricity=self.electricity,
            natural_gas=self.natural_gas,
            water=self.water,
            waste=self.waste,
            transportation=self.transportation,
            household_size=self.household_size,
            region=self.region,
        )


def parse_usage_form(raw: Mapping[str, Any] | None) -> UsageInput:
    """Build a UsageInput from a request body; never raises for bad values."""
    return CalculatorForm.model_validate(dict(raw or {})).to_usage_input()
