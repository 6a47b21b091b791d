"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional


class Period(str, Enum):
    """Budget/report period; selects a date-range formula"""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def from_alias(cls, value: str) -> "Period":
        """Accept both budget names (weekly) and report-screen names (week)"""
        aliases = {"week": cls.WEEKLY, "month": cls.MONTHLY, "year": cls.YEARLY}
        if value in aliases:
            return aliases[value]
        return cls(value)


class FilterMode(str, Enum):
    ALL = "all"
    INCLUDE = "include"
    EXCLUDE = "exclude"


@dataclass(frozen=True)
class DateRange:
    """Inclusive instant range"""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class LedgerEntry:
    """Bill or transaction as stored on the device"""

    id: str
    amount: float
    category: str
    date: datetime | date
    kind: Optional[str] = None  # "expense" | "income"; None means expense


@dataclass(frozen=True)
class CategoryFilters:
    """Include/exclude category sets applied to spend aggregation"""

    include: FrozenSet[str] = frozenset()
    exclude: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class BudgetDetail:
    """Budget amount and category filter for one period"""

    amount: Optional[float] = None
    filter_mode: FilterMode = FilterMode.ALL
    categories: FrozenSet[str] = frozenset()

    def filters(self) -> CategoryFilters:
        """Only the list matching filter_mode is meaningful; "all" ignores both"""
        if self.filter_mode == FilterMode.INCLUDE:
            return CategoryFilters(include=frozenset(self.categories))
        if self.filter_mode == FilterMode.EXCLUDE:
            return CategoryFilters(exclude=frozenset(self.categories))
        return CategoryFilters()


@dataclass
class Budgets:
    """Budget settings keyed by period"""

    details: Dict[Period, BudgetDetail] = field(default_factory=dict)

    def for_period(self, period: Period) -> BudgetDetail:
        return self.details.get(period, BudgetDetail())


@dataclass(frozen=True)
class BudgetStatsResult:
    """Derived budget progress; recomputed on every input change"""

    budget: Optional[float]
    spent: float
    remaining: float
    percentage: float
    status: str  # "good" | "warning" | "danger" | "none"


@dataclass(frozen=True)
class SubScore:
    """One weighted deduction component of the health score"""

    deduction: int
    pct: Optional[int] = None
    days: Optional[int] = None

    def to_dict(self) -> dict:
        payload = {"deduction": self.deduction}
        if self.days is not None:
            payload["days"] = self.days
        else:
            payload["pct"] = self.pct if self.pct is not None else 0
        return payload


@dataclass(frozen=True)
class HealthScoreDetail:
    """Score breakdown; no identity, no persistence"""

    score: int
    status: str  # "Good" | "Warning" | "Danger"
    sub_scores: Dict[str, SubScore]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "status": self.status,
            "subScores": {name: sub.to_dict() for name, sub in self.sub_scores.items()},
        }


@dataclass(frozen=True)
class Insight:
    """Actionable observation attached to a report"""

    id: str
    title: str
    description: str
    severity: str  # "info" | "warn" | "critical"
    theme: str
    recommended_action: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "severity": self.severity,
            "theme": self.theme,
        }
        if self.recommended_action:
            payload["recommendedAction"] = self.recommended_action
        return payload


@dataclass(frozen=True)
class CachedReportEntry:
    """Report payload as read back from the persisted store"""

    key: str
    data: dict

    @property
    def generated_at(self) -> Optional[str]:
        return self.data.get("generatedAt")
