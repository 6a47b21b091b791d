"""Period resolution - maps a period and "now" to its inclusive date range"""

from datetime import date, datetime, timedelta

from finhealth_gateway.domain.models import DateRange, Period
from finhealth_gateway.utils.date_utils import end_of_day, start_of_day


def resolve_period(period: Period, now: datetime | None = None) -> DateRange:
    """
    Return the inclusive range of the period containing `now`.

    - weekly:  Monday 00:00 through Sunday 23:59:59.999999 (ISO week)
    - monthly: first through last calendar day of the month
    - yearly:  Jan 1 through Dec 31

    Always derived from `now`; callers must not cache the result across days.
    """
    today = (now or datetime.now()).date()
    period = Period.from_alias(period) if isinstance(period, str) else period

    if period == Period.WEEKLY:
        first = today - timedelta(days=today.weekday())
        last = first + timedelta(days=6)
    elif period == Period.MONTHLY:
        first = today.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        last = next_month - timedelta(days=1)
    else:
        first = date(today.year, 1, 1)
        last = date(today.year, 12, 31)

    return DateRange(start=start_of_day(first), end=end_of_day(last))
