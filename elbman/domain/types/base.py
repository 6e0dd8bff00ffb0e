from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Link(BaseModel):
    rel: str
    href: str

    model_config = ConfigDict(frozen=True, extra="ignore")


class BaseInfo(BaseModel):
    """Common base for resources returned by the RightScale API."""

    href: Optional[str] = None
    links: List[Link] = Field(default_factory=list)

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        use_enum_values=True,
    )

    def link(self, rel: str) -> Optional[str]:
        """Return the href of the first link with the given ``rel``."""
        for link in self.links:
            if link.rel == rel:
                return link.href
        return None

    @classmethod
    def from_json(cls, data: Dict[str, Any]):
        """Build the model, filling ``href`` from the ``self`` link when absent."""
        info = cls(**data)
        if info.href is None:
            self_href = info.link("self")
            if self_href is not None:
                info = info.model_copy(update={"href": self_href})
        return info
