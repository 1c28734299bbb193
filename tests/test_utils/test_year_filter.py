"""Tests for the year filter."""

from collections.abc import Callable
from datetime import datetime, timezone

from github_issue_pdf.github_client.models import IssueSummary
from github_issue_pdf.utils.year_filter import filter_by_year, was_open_during

IssueFactory = Callable[..., IssueSummary]


def utc(year: int, month: int = 1, day: int = 1) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


class TestWasOpenDuring:
    """Test was_open_during predicate."""

    def test_created_in_year_closed_next_year(self, make_issue: IssueFactory) -> None:
        """Test an issue created in the target year is included."""
        issue = make_issue(created=utc(2021, 5, 1), closed=utc(2022, 1, 1))
        assert was_open_during(issue, 2021)

    def test_created_after_year(self, make_issue: IssueFactory) -> None:
        """Test an issue created after the target year is excluded."""
        issue = make_issue(created=utc(2021, 5, 1), closed=utc(2022, 1, 1))
        assert not was_open_during(issue, 2020)

    def test_still_open(self, make_issue: IssueFactory) -> None:
        """Test an old issue that was never closed is included."""
        issue = make_issue(created=utc(2019, 1, 1))
        assert was_open_during(issue, 2023)

    def test_closed_before_year(self, make_issue: IssueFactory) -> None:
        """Test an issue closed before the target year is excluded."""
        issue = make_issue(created=utc(2018, 3, 1), closed=utc(2019, 12, 31))
        assert not was_open_during(issue, 2020)

    def test_closed_during_year(self, make_issue: IssueFactory) -> None:
        """Test an issue closed during the target year is included."""
        issue = make_issue(created=utc(2018, 3, 1), closed=utc(2020, 6, 1))
        assert was_open_during(issue, 2020)

    def test_created_and_closed_same_year(self, make_issue: IssueFactory) -> None:
        """Test an issue opened and closed within the year is included."""
        issue = make_issue(created=utc(2020, 2, 1), closed=utc(2020, 2, 2))
        assert was_open_during(issue, 2020)


class TestFilterByYear:
    """Test filter_by_year function."""

    def test_preserves_order(self, make_issue: IssueFactory) -> None:
        """Test the kept issues stay in their input order."""
        a = make_issue(number=1, created=utc(2019, 1, 1), closed=utc(2019, 6, 1))
        b = make_issue(number=2, created=utc(2021, 1, 1))
        c = make_issue(number=3, created=utc(2021, 7, 1))

        assert filter_by_year([a, b, c], 2021) == [b, c]

    def test_empty_collection(self) -> None:
        """Test an empty collection stays empty."""
        assert filter_by_year([], 2021) == []

    def test_not_a_collection(self) -> None:
        """Test degenerate inputs yield an empty list."""
        assert filter_by_year(None, 2021) == []
        assert filter_by_year("issues", 2021) == []  # type: ignore[arg-type]
        assert filter_by_year(42, 2021) == []  # type: ignore[arg-type]

    def test_accepts_generators(self, make_issue: IssueFactory) -> None:
        """Test any iterable of issues is accepted."""
        issues = (make_issue(number=n, created=utc(2021)) for n in range(3))
        assert [i.number for i in filter_by_year(issues, 2021)] == [0, 1, 2]
