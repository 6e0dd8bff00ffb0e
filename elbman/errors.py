"""
Error taxonomy for elbman.

Components raise these; only :func:`elbman.ops.orchestrator.run` turns them
into a process exit code.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError


class ElbManagerError(Exception):
    """Base class for every failure elbman reports to the operator."""

    exit_code: int = 1


class ConfigurationError(ElbManagerError):
    """Invalid option combination or unresolvable action/environment pair."""

    exit_code = 2

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "ConfigurationError":
        problems = [
            "%s: %s" % (".".join(str(part) for part in error["loc"]) or "value", error["msg"])
            for error in exc.errors()
        ]
        return cls("Invalid configuration: " + "; ".join(problems))


class AuthenticationError(ElbManagerError):
    """The OAuth2 endpoint rejected the refresh token."""

    exit_code = 2


class ResourceNotFound(ElbManagerError):
    """The named server array does not exist."""

    exit_code = 3

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"FAILED.  Could not find {name}")


class AmbiguousResource(ElbManagerError):
    """Several server arrays carry exactly the requested name."""

    exit_code = 3

    def __init__(self, name: str, hrefs: list):
        self.name = name
        self.hrefs = list(hrefs)
        super().__init__(
            f"FAILED.  {len(self.hrefs)} server arrays are named {name!r}: "
            + ", ".join(self.hrefs)
        )


class TaskFailed(ElbManagerError):
    exit_code = 4

    def __init__(self, href: Optional[str], summary: str):
        self.href = href
        self.summary = summary
        super().__init__(f"FAILED.  RightScript task failed! ({summary})")


class PollTimeout(ElbManagerError):
    exit_code = 5

    def __init__(self, iterations: int, poll_interval: float):
        self.iterations = iterations
        self.poll_interval = poll_interval
        super().__init__(
            "Timeout waiting on RightScale task! (%s seconds)"
            % round(iterations * poll_interval, 3)
        )
