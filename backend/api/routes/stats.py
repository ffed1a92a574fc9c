"""
Statistics API endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError

from backend.api.dependencies import get_stats_service
from backend.api.schemas import UsersPerDayResponse, DailyCount, StatsMeta, StatsPeriod
from backend.core.config import get_settings
from backend.core.users import UsersService

router = APIRouter(prefix="/api/stats", tags=["statistics"])


@router.get("/users-per-day", response_model=UsersPerDayResponse)
def users_per_day(
    days: Optional[int] = Query(None, ge=1, description="Number of days, including today (default 7)"),
    service: UsersService = Depends(get_stats_service)
):
    """
    Get user registrations per day.

    **Returns:**
    - One point per day (UTC), oldest first, zero-filled
    - Total users registered in the period
    - Period start and end dates
    """
    settings = get_settings()
    if days is None:
        days = settings.stats_default_days
    elif days > settings.stats_max_days:
        raise RequestValidationError([{
            "type": "less_than_equal",
            "loc": ("query", "days"),
            "msg": f"Input should be less than or equal to {settings.stats_max_days}",
            "input": days,
        }])

    summary = service.get_users_per_day(days)

    return UsersPerDayResponse(
        data=[DailyCount(**point) for point in summary.stats],
        meta=StatsMeta(
            days=days,
            total_users=summary.total_users,
            period=StatsPeriod(start_date=summary.start_date, end_date=summary.end_date),
        ),
    )
