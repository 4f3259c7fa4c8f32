import asyncio
import logging
from typing import Protocol

from movieinfo.core.rate_gate import RateGate
from movieinfo.models.tmdb import Category, CategoryCatalog, PersonMatch

logger = logging.getLogger(__name__)


class PersonSearchClient(Protocol):
    async def search_person(self, name: str) -> list[PersonMatch]:
        ...

    async def list_genres(self) -> list[Category]:
        ...


class EntityResolver:
    """Turns free-text people and category names into TMDB ids."""

    def __init__(self, client: PersonSearchClient, gate: RateGate):
        self.client = client
        self.gate = gate
        self._catalog_task: asyncio.Task[CategoryCatalog] | None = None
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # no loop yet; the catalog is fetched on first use instead
            return
        self._start_catalog_fetch()

    def _start_catalog_fetch(self) -> asyncio.Task[CategoryCatalog]:
        if self._catalog_task is None:
            self._catalog_task = asyncio.ensure_future(self._fetch_catalog())
            self._catalog_task.add_done_callback(self._on_catalog_done)
        return self._catalog_task

    def _on_catalog_done(self, task: asyncio.Task[CategoryCatalog]) -> None:
        if task.cancelled():
            if self._catalog_task is task:
                self._catalog_task = None
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Category catalog fetch failed", extra={"error_type": exc.__class__.__name__})
            # drop the failed task so the next resolution fetches again
            if self._catalog_task is task:
                self._catalog_task = None

    async def _fetch_catalog(self) -> CategoryCatalog:
        categories = await self.gate.dispatch(self.client.list_genres)
        return CategoryCatalog(categories=tuple(categories))

    async def category_catalog(self) -> CategoryCatalog:
        # one fetch shared by all readers; cancelling a reader must not cancel it
        return await asyncio.shield(self._start_catalog_fetch())

    async def resolve_names(self, names: list[str]) -> list[int]:
        async def _first_match(name: str) -> int | None:
            matches = await self.client.search_person(name)
            if not matches:
                logger.debug("No person match", extra={"person_name": name})
                return None
            return matches[0].id

        found = await asyncio.gather(*[_first_match(name) for name in names])
        return [person_id for person_id in found if person_id is not None]

    async def resolve_categories(self, names: list[str]) -> list[int]:
        catalog = await self.category_catalog()
        resolved: list[int] = []
        for name in names:
            category_id = catalog.lookup(name)
            if category_id is None:
                logger.debug("No category match", extra={"category_name": name})
                continue
            resolved.append(category_id)
        return resolved
