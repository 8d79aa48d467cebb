from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List

from .api_clients.base import WordstatClient
from .api_clients.transformers import transform_regions_tree
from .logging_config import logger
from .models.regions import FlatIndexEntry, RegionNode
from .utils.regions_tree import flatten_tree

REGIONS_TREE_ENDPOINT = "/v1/getRegionsTree"


@dataclass(frozen=True)
class RegionsSnapshot:
    tree: List[RegionNode]
    flat_index: Dict[int, FlatIndexEntry]


class RegionsTreeCache:
    """Session-scoped copy of the Wordstat regions tree.

    The tree is fetched on first use and kept for the life of the object; it
    is never refreshed. Concurrent first callers share one fetch. A failed
    fetch stores nothing, so the next caller tries again.
    """

    def __init__(self, client: WordstatClient) -> None:
        self._client = client
        self._snapshot: RegionsSnapshot | None = None
        self._inflight: asyncio.Task[RegionsSnapshot] | None = None

    @property
    def fetched(self) -> bool:
        return self._snapshot is not None

    async def get_tree(self) -> List[RegionNode]:
        return (await self._load()).tree

    async def get_flat_index(self) -> Dict[int, FlatIndexEntry]:
        return (await self._load()).flat_index

    async def _load(self) -> RegionsSnapshot:
        if self._snapshot is not None:
            return self._snapshot
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._fetch())
        # Shielded so one cancelled caller does not cancel the fetch the others wait on.
        return await asyncio.shield(self._inflight)

    async def _fetch(self) -> RegionsSnapshot:
        logger.info("regions_tree.fetch_start")
        try:
            payload = await self._client.call(REGIONS_TREE_ENDPOINT)
            tree = transform_regions_tree(payload)
            flat_index = flatten_tree(tree)
            self._snapshot = RegionsSnapshot(tree=tree, flat_index=flat_index)
        except Exception as exc:
            logger.warning("regions_tree.fetch_failed", error=str(exc))
            raise
        finally:
            self._inflight = None
        logger.info("regions_tree.fetched", roots=len(tree), regions=len(flat_index))
        return self._snapshot
