"""Food catalog snapshots and external food lookup."""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

from life_dashboard.adapters.openfoodfacts_client import OpenFoodFactsClient
from life_dashboard.domain.nutrition import FoodCatalog, FoodEntry, MacroTotals
from life_dashboard.numbers import to_non_negative_float
from life_dashboard.services.cache import Cache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)

CATALOG_CACHE_KEY = "foods:catalog"
KJ_PER_KCAL = 4.184
UNKNOWN_PRODUCT = "Unknown Product"


class FoodRepository(Protocol):
    """Persistence interface for the food catalog."""

    def list_foods(self) -> list[FoodEntry]:
        """Return every food entry."""


@dataclass
class FoodCatalogService:
    """Produces read-only catalog snapshots, cached for a short TTL."""

    repository: FoodRepository
    cache: Cache
    ttl_seconds: int = 300

    def get_catalog(self) -> FoodCatalog:
        """Return a point-in-time ``name -> FoodEntry`` mapping."""
        cached = self.cache.get(CATALOG_CACHE_KEY)
        if isinstance(cached, MappingProxyType):
            return cached

        entries: dict[str, FoodEntry] = {}
        for food in self.repository.list_foods():
            if food.name in entries:
                _logger.warning("Duplicate food name in catalog: %s", food.name)
                continue
            entries[food.name] = food
        snapshot = MappingProxyType(entries)
        self.cache.set(CATALOG_CACHE_KEY, snapshot, ttl_seconds=self.ttl_seconds)
        _logger.info("Food catalog loaded: foods=%s", len(entries))
        return snapshot

    def invalidate(self) -> None:
        """Force the next ``get_catalog`` call to reload."""
        self.cache.delete(CATALOG_CACHE_KEY)


@dataclass
class FoodLookupService:
    """Searches Open Food Facts and maps products to catalog candidates."""

    client: OpenFoodFactsClient
    cache: Cache
    search_ttl_seconds: int = 3600
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 10) -> list[FoodEntry]:
        """Return candidate foods for a free-text query."""
        query = query.strip()
        if not query:
            return []
        cache_key = f"off:search:{query.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.client.search_products(query, page_size=limit),
            action="search",
        )
        products = payload.get("products") or []
        foods = [
            product_to_food(product)
            for product in products
            if isinstance(product, Mapping)
        ]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        _logger.info("Food lookup: query=%s results=%s", query, len(foods))
        return foods

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Food lookup %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def product_to_food(product: Mapping[str, object]) -> FoodEntry:
    """Map an Open Food Facts product to a per-100 g food entry.

    Energy in kcal is preferred; products that only report kJ are converted.
    Cost and unit handling are left for the user to fill in.
    """
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, Mapping):
        nutriments = {}
    calories = to_non_negative_float(
        nutriments.get("energy-kcal_100g") or nutriments.get("energy_kcal_100g")
    )
    if calories == 0:
        calories = to_non_negative_float(nutriments.get("energy_100g")) / KJ_PER_KCAL
    name = product.get("product_name")
    if not isinstance(name, str) or not name.strip():
        name = UNKNOWN_PRODUCT
    return FoodEntry(
        name=name.strip(),
        nutrition=MacroTotals(
            protein=round(to_non_negative_float(nutriments.get("proteins_100g")), 2),
            fats=round(to_non_negative_float(nutriments.get("fat_100g")), 2),
            carbs=round(to_non_negative_float(nutriments.get("carbohydrates_100g")), 2),
            calories=round(calories, 2),
        ),
    )


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
