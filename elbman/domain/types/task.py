import enum

from pydantic import Field, field_validator

from elbman.domain.types.base import BaseInfo


class TaskState(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


def classify_summary(summary: str) -> TaskState:
    """
    Map a free-text task summary onto a :class:`TaskState`.

    The API exposes no structured state for script runs, only a summary such
    as ``"completed: ELB attach"`` or ``"failed: ..."``. Anything that
    mentions neither word is still running.
    """
    if "completed" in summary:
        return TaskState.COMPLETED
    if "failed" in summary:
        return TaskState.FAILED
    return TaskState.PENDING


class TaskInfo(BaseInfo):
    summary: str = Field(default="", description="Free-text status reported by the API")

    @field_validator("summary", mode="before")
    def validate_summary(cls, v):
        # the API sends null before the script has reported anything
        return "" if v is None else v

    @property
    def state(self) -> TaskState:
        return classify_summary(self.summary)

    def __str__(self) -> str:
        return f"{self.href} ({self.summary or 'no summary'})"
