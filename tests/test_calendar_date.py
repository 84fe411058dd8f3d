import pytest

from contribution_graph.core.calendar_date import CalendarDate


def test_day_of_week_counts_from_sunday() -> None:
    assert CalendarDate.parse("2023-01-01").day_of_week == 0
    assert CalendarDate.parse("2023-01-04").day_of_week == 3
    assert CalendarDate.parse("2023-01-07").day_of_week == 6


@pytest.mark.parametrize(
    ("weekday", "expected"),
    [
        (0, "2023-01-01"),
        (3, "2023-01-04"),
        (6, "2023-01-07"),
        (7, "2023-01-08"),
    ],
)
def test_set_day_of_week_stays_in_sunday_based_week(
    weekday: int, expected: str
) -> None:
    wednesday = CalendarDate.parse("2023-01-04")

    assert wednesday.set_day_of_week(weekday).format_iso() == expected


def test_add_days_crosses_year_boundary() -> None:
    assert CalendarDate.parse("2022-12-30").add_days(3).format_iso() == "2023-01-02"


def test_sub_months_clamps_to_end_of_shorter_month() -> None:
    assert CalendarDate.parse("2023-03-31").sub_months(1).format_iso() == "2023-02-28"
    assert CalendarDate.parse("2024-03-31").sub_months(1).format_iso() == "2024-02-29"
    assert CalendarDate.parse("2023-01-15").sub_months(3).format_iso() == "2022-10-15"


def test_sub_years_moves_leap_day_to_february_28() -> None:
    assert CalendarDate.parse("2024-02-29").sub_years(1).format_iso() == "2023-02-28"


def test_comparisons() -> None:
    earlier = CalendarDate.parse("2023-05-01")
    later = CalendarDate.parse("2023-05-02")

    assert later.is_after(earlier)
    assert not earlier.is_after(later)
    assert not earlier.is_after(earlier)
    assert earlier < later
    assert earlier.is_same_year(CalendarDate.from_year(2023))
    assert not earlier.is_same_year(CalendarDate.from_year(2022))


def test_month_and_short_month_name() -> None:
    day = CalendarDate.parse("2023-09-15")

    assert day.month_of == 9
    assert day.format_short_month() == "Sep"
    assert str(day) == "2023-09-15"
