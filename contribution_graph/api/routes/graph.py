import json

import httpx
from fastapi import APIRouter
from fastapi import HTTPException
from fastapi import Path
from fastapi import Query
from pydantic import ValidationError

from contribution_graph.api.schemas.graph import GraphData
from contribution_graph.api.schemas.graph import GraphOptions
from contribution_graph.api.schemas.graph import GraphYear
from contribution_graph.api.schemas.graph import MonthSpan
from contribution_graph.contributions_api import InvalidPayloadError
from contribution_graph.core.calendar_date import CalendarDate
from contribution_graph.services.graph_service import DataUnavailableError
from contribution_graph.services.graph_service import fetch_and_build
from contribution_graph.settings import Settings


router = APIRouter()
settings = Settings()

DEFAULT_MONTHS = 12


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "Hello World"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/graph/{username}")
async def get_contribution_graph(
    username: str = Path(min_length=1, max_length=100),
    months: list[MonthSpan] = Query(default=[]),
    years: list[GraphYear] = Query(default=[]),
    use_months: bool = False,
    full_year: bool = False,
) -> list[GraphData]:
    """Return contribution graph data for each requested month span or year."""

    today = CalendarDate.today()
    if use_months and not months:
        months = [DEFAULT_MONTHS]
    if not use_months and not years:
        years = [today.value.year]

    options = GraphOptions(
        username=username,
        months=months,
        years=years,
        use_months=use_months,
        full_year=full_year,
    )

    try:
        return await fetch_and_build(options, settings, today=today)
    except DataUnavailableError as exc:
        raise HTTPException(status_code=404, detail="No data available") from exc
    except (
        httpx.HTTPError,
        json.JSONDecodeError,
        InvalidPayloadError,
        ValidationError,
    ) as exc:
        raise HTTPException(
            status_code=502, detail="Contributions API request failed"
        ) from exc
