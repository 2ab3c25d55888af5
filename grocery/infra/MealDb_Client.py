"""TheMealDB JSON API client.

Endpoints (relative to MEALDB_BASE_URL):
  search.php?s=<name>     search by name
  search.php?f=<letter>   list by first letter
  filter.php?i=<name>     filter by main ingredient (summary records only)
  lookup.php?i=<id>       full record by id

Every endpoint answers {"meals": [...]} or {"meals": null} when nothing matched.
"""
import logging
from typing import List, Optional

import httpx

from grocery.domain.Recipe import Recipe
from grocery.utilities import config
from grocery.utilities.errors import RecipeApiError

logger = logging.getLogger(__name__)


class MealDbClient:
    def __init__(self, base_url: str = config.MEALDB_BASE_URL, timeout: float = config.HTTP_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None):
        if not base_url.endswith('/'):
            base_url += '/'
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self):
        self._client.close()

    def _meals(self, endpoint: str, params: dict) -> List[Recipe]:
        try:
            response = self._client.get(endpoint, params=params)
        except httpx.HTTPError as e:
            logger.error("Recipe API request %s %s failed: %s", endpoint, params, e)
            raise RecipeApiError(f"Recipe API unreachable: {e}") from e
        if response.status_code != 200:
            logger.error("Recipe API %s answered %s", endpoint, response.status_code)
            raise RecipeApiError(f"Recipe API answered {response.status_code}", response.status_code)
        try:
            body = response.json()
        except ValueError as e:
            raise RecipeApiError("Recipe API returned invalid JSON") from e
        meals = body.get("meals") if isinstance(body, dict) else None
        if not meals:
            return []
        recipes = []
        for meal in meals:
            try:
                recipes.append(Recipe.from_api(meal))
            except ValueError as e:
                logger.warning("Skipping malformed recipe record: %s", e)
        return recipes

    def search_by_name(self, query: str) -> List[Recipe]:
        return self._meals("search.php", {"s": query})

    def filter_by_ingredient(self, ingredient: str) -> List[Recipe]:
        return self._meals("filter.php", {"i": ingredient})

    def lookup_by_id(self, recipe_id: str) -> Optional[Recipe]:
        found = self._meals("lookup.php", {"i": recipe_id})
        return found[0] if found else None

    def list_by_first_letter(self, letter: str) -> List[Recipe]:
        if len(letter) != 1 or not letter.isalpha():
            raise ValueError(f"expected a single letter, got {letter!r}")
        return self._meals("search.php", {"f": letter.lower()})


__all__ = ['MealDbClient']
