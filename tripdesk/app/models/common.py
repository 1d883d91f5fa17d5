"""Common types shared across models."""

from enum import Enum

from pydantic import BaseModel, Field


class Geo(BaseModel):
    """Geographic coordinates (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class BudgetTier(str, Enum):
    """Budget tier used when a trip budget is given as a word."""

    budget = "budget"
    mid = "mid"
    luxury = "luxury"

    @classmethod
    def parse(cls, budget: str | float) -> "BudgetTier":
        """Map a free-form budget onto a tier.

        Numeric budgets are per-trip amounts; unknown words map to ``mid``.
        """
        if isinstance(budget, (int, float)):
            if budget < 1000:
                return cls.budget
            if budget < 4000:
                return cls.mid
            return cls.luxury

        text = budget.strip().lower()
        if text in ("low", "cheap", "budget", "economy"):
            return cls.budget
        if text in ("high", "luxury", "premium"):
            return cls.luxury
        return cls.mid
