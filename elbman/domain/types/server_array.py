from typing import Optional

from pydantic import Field

from elbman.domain.types.base import BaseInfo


class ServerArrayInfo(BaseInfo):
    name: str = Field(..., description="Name of the server array")
    description: Optional[str] = Field(default=None, description="Server array description")
    state: Optional[str] = Field(default=None, description="enabled or disabled")
    array_type: Optional[str] = Field(default=None, description="alert or queue")
    instances_count: Optional[int] = Field(
        default=None, description="Number of running instances in the array"
    )

    def __str__(self) -> str:
        return f"{self.name} ({self.href})"
