from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type

from elbman.domain.types.base import BaseInfo

if TYPE_CHECKING:
    from elbman.api.api import Api


class ModuleApi:
    """Base class for concrete API clients."""

    def __init__(self, api: "Api"):
        self._api = api

    def _endpoint_prefix(self) -> str:
        raise NotImplementedError()

    @staticmethod
    def _info_class() -> Type[BaseInfo]:
        raise NotImplementedError()

    @property
    def endpoint(self) -> str:
        return "/api/" + self._endpoint_prefix().strip("/")

    def _to_info(self, item: Dict[str, Any]) -> BaseInfo:
        return self._info_class().from_json(item)

    def _get_list(self, params: Optional[Any] = None) -> List[BaseInfo]:
        """_get_list"""
        resp = self._api.get(self.endpoint, params=params)
        return [self._to_info(item) for item in resp.json()]
