from dataclasses import dataclass
from datetime import date
from datetime import timedelta

from dateutil.relativedelta import relativedelta


SHORT_MONTH_NAMES = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass(frozen=True, order=True)
class CalendarDate:
    """Calendar day with Sunday-based week arithmetic.

    Weekdays are numbered 0 (Sunday) through 6 (Saturday), which is the
    numbering used by the contribution grid.
    """

    value: date

    @classmethod
    def parse(cls, raw_value: str) -> "CalendarDate":
        """Parse a `YYYY-MM-DD` string."""

        return cls(date.fromisoformat(raw_value))

    @classmethod
    def from_year(cls, year: int) -> "CalendarDate":
        """Return January 1st of `year`."""

        return cls(date(year, 1, 1))

    @classmethod
    def today(cls) -> "CalendarDate":
        return cls(date.today())

    @property
    def day_of_week(self) -> int:
        return (self.value.weekday() + 1) % 7

    @property
    def month_of(self) -> int:
        return self.value.month

    def add_days(self, days: int) -> "CalendarDate":
        return CalendarDate(self.value + timedelta(days=days))

    def set_day_of_week(self, day: int) -> "CalendarDate":
        """Move to weekday `day` of the Sunday-based week containing this date.

        `day` may fall outside 0..6; 7 lands on the following Sunday.
        """

        return self.add_days(day - self.day_of_week)

    def sub_months(self, months: int) -> "CalendarDate":
        """Step back whole months, clamping to the end of shorter months."""

        return CalendarDate(self.value - relativedelta(months=months))

    def sub_years(self, years: int) -> "CalendarDate":
        """Step back whole years; Feb 29 becomes Feb 28."""

        return CalendarDate(self.value - relativedelta(years=years))

    def is_after(self, other: "CalendarDate") -> bool:
        return self.value > other.value

    def is_same_year(self, other: "CalendarDate") -> bool:
        return self.value.year == other.value.year

    def format_iso(self) -> str:
        return self.value.isoformat()

    def format_short_month(self) -> str:
        # strftime("%b") follows the process locale; labels are always English.
        return SHORT_MONTH_NAMES[self.value.month - 1]

    def __str__(self) -> str:
        return self.format_iso()
