"""
Finding a server array by its exact name.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from elbman.domain.types.server_array import ServerArrayInfo
from elbman.errors import AmbiguousResource, ResourceNotFound

if TYPE_CHECKING:
    from elbman.api.api import Api


def find_all(api: "Api", name: str) -> List[ServerArrayInfo]:
    """
    Return every server array the API's ``name==`` filter matches.

    The filter is a partial match, so ``foo`` also returns ``foo_v2``.
    """
    return api.server_array.get_list(filter=["name==" + name])


def locate(api: "Api", name: str, logger: Optional[logging.Logger] = None) -> ServerArrayInfo:
    """
    Find the server array named exactly ``name``.

    :param api: API client.
    :param name: Server array name.
    :param logger: Logger for FOUND / NOT FOUND lines.
    :raises ResourceNotFound: if no candidate has exactly this name.
    :raises AmbiguousResource: if more than one does.
    """
    logger = logger or logging.getLogger(__name__)
    logger.debug('Using "%s" to find "%s"', api.api_url, name)

    candidates = find_all(api, name)
    matches = [sa for sa in candidates if sa.name == name]

    if not matches:
        logger.info("NOT FOUND. %s is not found.", name)
        raise ResourceNotFound(name)
    if len(matches) > 1:
        raise AmbiguousResource(name, [str(sa.href) for sa in matches])

    logger.info("FOUND. %s exists.", name)
    return matches[0]
