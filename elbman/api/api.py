import logging
from typing import Optional

from elbman.api._api import DEFAULT_API_VERSION, _Api
from elbman.api.server_array_api import ServerArrayApi
from elbman.api.task_api import TaskApi


class Api(_Api):

    def __init__(
        self,
        api_url: str,
        refresh_token: Optional[str] = None,
        oauth2_api_url: Optional[str] = None,
        api_version: Optional[str] = DEFAULT_API_VERSION,
        retry_count: Optional[int] = 10,
        retry_sleep_sec: Optional[float] = 1,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(
            api_url=api_url,
            refresh_token=refresh_token,
            oauth2_api_url=oauth2_api_url,
            api_version=api_version,
            retry_count=retry_count,
            retry_sleep_sec=retry_sleep_sec,
            logger=logger,
        )

        self.server_array = ServerArrayApi(self)
        self.task = TaskApi(self)
