"""Orchestration of fetch, filter and render across repositories."""

from .dispatcher import RequestDispatcher, Route, select_route
from .orchestrator import AccountOrchestrator, RepoOrchestrator, RepoOutcome, RunSummary

__all__ = [
    "AccountOrchestrator",
    "RepoOrchestrator",
    "RepoOutcome",
    "RequestDispatcher",
    "Route",
    "RunSummary",
    "select_route",
]
