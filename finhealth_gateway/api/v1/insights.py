"""POST /v1/reports/insights - authoritative health score and insights"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request

from finhealth_gateway.api.dependencies import get_language, get_request_id
from finhealth_gateway.api.v1.schemas import InsightsResponse
from finhealth_gateway.domain.exceptions import InvalidSummaryError
from finhealth_gateway.domain.insights import generate_insights
from finhealth_gateway.domain.scoring import score_summary
from finhealth_gateway.domain.summary import BillSummaryInput
from finhealth_gateway.infrastructure.observability.metrics import record_health_score

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/reports/insights", response_model=InsightsResponse, response_model_exclude_none=True)
async def create_insights(
    summary: BillSummaryInput,
    request: Request,
    language: str = Depends(get_language),
):
    """
    Score a period summary and attach insights.

    Flow:
    1. Validate the date range
    2. Compute the authoritative score (with savings when income is known)
    3. Derive rule-based insights
    4. Stamp generatedAt for day-boundary cache staleness on the client
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        if summary.is_ready and summary.start_date > summary.end_date:
            raise InvalidSummaryError("startDate is after endDate")

        detail = score_summary(summary)
        insights = generate_insights(summary, detail)
        record_health_score(detail.status, "server")

        logger.info(
            "Insights generated",
            extra={
                "request_id": request_id,
                "step": "insights_complete",
                "period": summary.period.value,
                "health_score": detail.score,
                "duration_ms": (time.time() - start_time) * 1000,
            },
        )

        return {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "language": language,
            "healthScore": detail.to_dict(),
            "insights": [insight.to_dict() for insight in insights],
        }

    except InvalidSummaryError as e:
        logger.warning(f"Invalid summary: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logger.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
