"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Dict, List, Optional

from finhealth_gateway.domain.models import FilterMode, Period


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubScoreSchema(ApiModel):
    deduction: int
    pct: Optional[int] = None
    days: Optional[int] = None


class HealthScoreSchema(ApiModel):
    score: int
    status: str
    sub_scores: Dict[str, SubScoreSchema]


class InsightSchema(ApiModel):
    id: str
    title: str
    description: str
    severity: str
    theme: str
    recommended_action: Optional[str] = None


class InsightsResponse(ApiModel):
    """Response for POST /v1/reports/insights"""

    generated_at: str
    language: str
    health_score: HealthScoreSchema
    insights: List[InsightSchema]


class LedgerEntrySchema(ApiModel):
    id: str
    amount: float = Field(..., ge=0)
    category: str
    date: datetime
    kind: Optional[str] = Field(default=None, pattern="^(expense|income)$")


class BudgetDetailSchema(ApiModel):
    amount: Optional[float] = None
    filter_mode: FilterMode = FilterMode.ALL
    categories: List[str] = Field(default_factory=list)


class BudgetStatsRequest(ApiModel):
    """Request body for POST /v1/budget/stats"""

    period: Period
    budget: Optional[BudgetDetailSchema] = None
    entries: List[LedgerEntrySchema] = Field(default_factory=list)
    now: Optional[datetime] = None


class BudgetStatsResponse(ApiModel):
    budget: Optional[float]
    spent: float
    remaining: float
    percentage: float
    status: str
