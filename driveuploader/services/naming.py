"""Collision-free file naming inside a target folder."""
import logging
import time
from typing import Callable, Tuple

from ..errors import RemoteStoreError
from ..protocols import IRemoteStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 99


def split_name(name: str) -> Tuple[str, str]:
    """Split at the last dot: "report.tar.gz" -> ("report.tar", ".gz")."""
    index = name.rfind(".")
    if index == -1:
        return name, ""
    return name[:index], name[index:]


class NameDisambiguator:
    """
    Pick a file name that does not collide with an existing entry.

    Policy:
        report.pdf -> report(1).pdf -> ... -> report(99).pdf
        then report_<epoch millis>.pdf without a further check.

    A failed existence check falls back to the desired name, leaving any
    collision to the remote store.
    """

    def __init__(
        self,
        store: IRemoteStore,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._max_attempts = max_attempts
        self._clock = clock

    async def _exists(self, name: str, folder_id: str) -> bool:
        entries = await self._store.list_entries(folder_id, name)
        return len(entries) > 0

    async def unique_name(self, desired_name: str, folder_id: str) -> str:
        try:
            if not await self._exists(desired_name, folder_id):
                return desired_name

            stem, ext = split_name(desired_name)
            for counter in range(1, self._max_attempts + 1):
                candidate = f"{stem}({counter}){ext}"
                if not await self._exists(candidate, folder_id):
                    return candidate

            fallback = f"{stem}_{int(self._clock() * 1000)}{ext}"
            logger.warning(
                f"{self._max_attempts} numbered variants of {desired_name!r} taken, "
                f"using unchecked name {fallback!r}"
            )
            return fallback
        except RemoteStoreError as e:
            logger.warning(f"Error checking filename uniqueness for {desired_name!r}: {e}")
            return desired_name
