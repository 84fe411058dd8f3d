from typing import Annotated

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import PrivateAttr


# Week columns spill into the neighbouring years; these bounds keep every
# cell inside the range `datetime.date` supports.
MIN_YEAR = 1970
MAX_YEAR = 9998
MAX_MONTHS = 1200

GraphYear = Annotated[int, Field(ge=MIN_YEAR, le=MAX_YEAR)]
MonthSpan = Annotated[int, Field(ge=1, le=MAX_MONTHS)]


class ContributionDay(BaseModel):
    """Contribution count reported by the provider for one day."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    date: str
    count: int = Field(ge=0)
    color: str | None = None
    intensity: int | None = None


class YearRange(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    start: str
    end: str


class YearTotal(BaseModel):
    """Contribution total for one calendar year."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    year: str
    total: int = Field(ge=0)
    range: YearRange | None = None


class ContributionData(BaseModel):
    """Raw provider payload: yearly totals plus one record per day.

    Lookups by date string go through mappings built once on construction.
    When a date appears more than once the first record wins.
    """

    model_config = ConfigDict(extra="ignore")

    years: list[YearTotal]
    contributions: list[ContributionDay]

    _by_date: dict[str, ContributionDay] = PrivateAttr(default_factory=dict)
    _positions: dict[str, int] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: object) -> None:
        for position, contribution in enumerate(self.contributions):
            if contribution.date in self._positions:
                continue
            self._positions[contribution.date] = position
            self._by_date[contribution.date] = contribution

    def find(self, day: str) -> ContributionDay | None:
        return self._by_date.get(day)

    def index_of(self, day: str) -> int:
        """Return the list position of `day`, or -1 when it is not covered."""

        return self._positions.get(day, -1)


class DayCell(BaseModel):
    """Single grid cell; `info` is empty for dates outside the dataset."""

    date: str
    info: ContributionDay | None = None
    level: int = 0


class MonthLabel(BaseModel):
    column: int
    label: str


class GraphData(BaseModel):
    """Week columns, month markers and total for one requested range."""

    months: int | None = None
    year: int | None = None
    blocks: list[list[DayCell]]
    month_labels: list[MonthLabel]
    total_count: int


class GraphOptions(BaseModel):
    """Parameters for building one or more contribution graphs."""

    username: str = Field(min_length=1, max_length=100)
    months: list[MonthSpan] = Field(default_factory=list)
    years: list[GraphYear] = Field(default_factory=list)
    use_months: bool = False
    full_year: bool = False
