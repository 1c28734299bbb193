"""Selecting the issues that were open during a given calendar year."""

from collections.abc import Iterable

from ..github_client.models import IssueSummary


def was_open_during(issue: IssueSummary, year: int) -> bool:
    """Return True if the issue existed, unresolved, at some point in ``year``.

    An issue qualifies when it was created in ``year``, or when it was
    created on or before ``year`` and was either never closed or closed
    in or after ``year``.
    """
    created_year = issue.created_at.year
    if created_year == year:
        return True
    if created_year > year:
        return False
    return issue.closed_at is None or issue.closed_at.year >= year


def filter_by_year(issues: Iterable[IssueSummary] | None, year: int) -> list[IssueSummary]:
    """Keep the issues open during ``year``, preserving input order.

    Anything that is not a collection of issues yields an empty list.
    """
    if issues is None or isinstance(issues, (str, bytes)):
        return []
    try:
        candidates = list(issues)
    except TypeError:
        return []
    return [
        issue
        for issue in candidates
        if isinstance(issue, IssueSummary) and was_open_during(issue, year)
    ]
