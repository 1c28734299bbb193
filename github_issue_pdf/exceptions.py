"""Exception types raised by the fetch and render pipeline."""


class GipError(Exception):
    """Base class for errors raised by github_issue_pdf."""


class FetchError(GipError):
    """A paginated fetch for one target could not be completed."""

    def __init__(self, target: str, cause: BaseException | None = None):
        self.target = target
        self.cause = cause
        message = f"Failed to fetch {target}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class FetchCancelledError(FetchError):
    """The fetch was cancelled before the last page was requested."""

    def __init__(self, target: str):
        super().__init__(target)
        self.args = (f"Fetch of {target} was cancelled",)


class RenderError(GipError):
    """One or more issues of a repository failed to render."""

    def __init__(self, repo: str, failures: list[tuple[int, BaseException]]):
        self.repo = repo
        self.failures = failures
        numbers = ", ".join(f"#{number}" for number, _ in failures)
        super().__init__(
            f"{len(failures)} issue(s) from {repo} failed to render: {numbers}"
        )


class RenderCancelledError(GipError):
    """A render was skipped because the run was cancelled."""
