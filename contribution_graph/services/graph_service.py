import logging
from datetime import date

from contribution_graph.api.schemas.graph import ContributionData
from contribution_graph.api.schemas.graph import ContributionDay
from contribution_graph.api.schemas.graph import DayCell
from contribution_graph.api.schemas.graph import GraphData
from contribution_graph.api.schemas.graph import GraphOptions
from contribution_graph.api.schemas.graph import MonthLabel
from contribution_graph.contributions_api import fetch_contribution_data
from contribution_graph.core.calendar_date import CalendarDate
from contribution_graph.settings import Settings


logger = logging.getLogger(__name__)


class DataUnavailableError(Exception):
    """Raised when the provider returns no yearly totals or no daily records."""


def contribution_level(count: int) -> int:
    """Map daily contribution count to a heatmap level in range 0..4."""

    if count <= 0:
        return 0
    if count <= 2:
        return 1
    if count <= 5:
        return 2
    if count <= 9:
        return 3
    return 4


def lookup(day: CalendarDate, data: ContributionData) -> ContributionDay | None:
    return data.find(day.format_iso())


def _build_cell(day: CalendarDate, data: ContributionData) -> DayCell:
    info = lookup(day, data)
    return DayCell(
        date=day.format_iso(),
        info=info,
        level=contribution_level(info.count) if info else 0,
    )


def build_week_grid(
    window_start: CalendarDate,
    window_end: CalendarDate,
    data: ContributionData,
) -> list[list[DayCell]]:
    """Lay out the window as Sunday-anchored week columns.

    A window that does not start on a Sunday is advanced by its own weekday
    index, so the first anchor is not always the next Sunday. Columns after
    the first are anchored on consecutive Sundays. Cells past `window_end`
    are cut off.
    """

    anchor = window_start
    if window_start.day_of_week != 0:
        anchor = window_start.add_days(window_start.day_of_week)

    blocks: list[list[DayCell]] = []
    while not anchor.is_after(window_end):
        column: list[DayCell] = []
        for weekday in range(7):
            day = anchor.set_day_of_week(weekday)
            if day.is_after(window_end):
                break
            column.append(_build_cell(day, data))

        blocks.append(column)
        anchor = anchor.set_day_of_week(7)

    return blocks


def build_month_labels(
    blocks: list[list[DayCell]], full_year: bool
) -> list[MonthLabel]:
    """Mark the first column of each month.

    The trailing column of a full-year window is never labelled. A December
    first column is not labelled either, so a window starting mid-December
    opens without a stray "Dec".
    """

    columns = blocks[:-1] if full_year else blocks
    previous_month = 0
    labels: list[MonthLabel] = []

    for x, week in enumerate(columns):
        first_day = CalendarDate.parse(week[0].date)
        month = first_day.month_of
        if month == previous_month:
            continue
        if x == 0 and month == 12:
            continue

        labels.append(MonthLabel(column=x, label=first_day.format_short_month()))
        previous_month = month

    return labels


def _sum_between(
    data: ContributionData, newest: CalendarDate, boundary: CalendarDate
) -> int:
    begin = data.index_of(newest.format_iso())
    end = data.index_of(boundary.format_iso())
    if begin < 0 or end < 0:
        return 0

    # Positional and end-exclusive: with newest-first data this covers
    # `newest` back to the day after `boundary`.
    return sum(contribution.count for contribution in data.contributions[begin:end])


def total_for_full_month_window(data: ContributionData, today: CalendarDate) -> int:
    return _sum_between(data, today, today.sub_months(1))


def total_for_full_year_window(data: ContributionData, today: CalendarDate) -> int:
    return _sum_between(data, today, today.sub_years(1))


def total_for_calendar_year(year: int, data: ContributionData) -> int:
    for entry in data.years:
        if entry.year == str(year):
            return entry.total
    return 0


def assemble_for_months(
    months: int, data: ContributionData, today: CalendarDate
) -> GraphData:
    blocks = build_week_grid(today.sub_months(months), today, data)
    return GraphData(
        months=months,
        blocks=blocks,
        month_labels=build_month_labels(blocks, False),
        total_count=total_for_full_month_window(data, today),
    )


def assemble_for_year(
    year: int, data: ContributionData, full_year: bool, today: CalendarDate
) -> GraphData:
    if full_year:
        window_start = today.sub_years(1)
        window_end = today
        total_count = total_for_full_year_window(data, today)
    else:
        window_start = CalendarDate(date(year, 1, 1))
        window_end = CalendarDate(date(year, 12, 31))
        total_count = total_for_calendar_year(year, data)

    blocks = build_week_grid(window_start, window_end, data)
    return GraphData(
        year=year,
        blocks=blocks,
        month_labels=build_month_labels(blocks, full_year),
        total_count=total_count,
    )


async def fetch_and_build(
    options: GraphOptions,
    settings: Settings,
    today: CalendarDate | None = None,
) -> list[GraphData]:
    """Fetch contributions for `options.username` and build every requested graph.

    Raises:
        DataUnavailableError: If the provider has no yearly totals or no days.
    """

    payload = await fetch_contribution_data(
        username=options.username,
        api_url=settings.contributions_api_url,
        timeout=settings.request_timeout_seconds,
    )
    data = ContributionData.model_validate(payload)

    if not data.years:
        raise DataUnavailableError("No data available")
    if not data.contributions:
        raise DataUnavailableError("No data available")

    if today is None:
        today = CalendarDate.today()

    logger.debug(
        "Building graphs for %s (use_months=%s, full_year=%s)",
        options.username,
        options.use_months,
        options.full_year,
    )

    if options.use_months:
        return [assemble_for_months(months, data, today) for months in options.months]

    return [
        assemble_for_year(
            year,
            data,
            options.full_year and CalendarDate.from_year(year).is_same_year(today),
            today,
        )
        for year in options.years
    ]
