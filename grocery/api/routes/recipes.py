import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from grocery.api.services import Services, get_services
from grocery.logic.recipes.ingredients import (
    classify_ingredients, format_ingredient_lines, render_ingredient_groups
)
from grocery.utilities.constants import DEFAULT_RECIPE_LETTER
from grocery.utilities.errors import RecipeApiError

router = APIRouter(prefix="/api/recipes", tags=["recipes"])
logger = logging.getLogger(__name__)


@router.get("")
def list_recipes(q: Optional[str] = Query(default=None, description="Search by name"),
                 ingredient: Optional[str] = Query(default=None, description="Filter by main ingredient"),
                 letter: Optional[str] = Query(default=None, description="List by first letter"),
                 services: Services = Depends(get_services)):
    """Recipe summaries; without any filter the recipes starting with 'a' are listed."""
    try:
        if q and q.strip():
            recipes = services.recipes.search_by_name(q.strip())
        elif ingredient and ingredient.strip():
            recipes = services.recipes.filter_by_ingredient(ingredient.strip())
        else:
            recipes = services.recipes.list_by_first_letter((letter or DEFAULT_RECIPE_LETTER).strip())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecipeApiError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"recipes": [r.to_summary() for r in recipes]}


@router.get("/{recipe_id}")
def recipe_detail(recipe_id: str, services: Services = Depends(get_services)):
    try:
        recipe = services.recipes.lookup_by_id(recipe_id)
    except RecipeApiError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")

    simple, harder = classify_ingredients(recipe.ingredient_names())
    data = recipe.to_dict()
    data.update({
        "ingredient_lines": format_ingredient_lines(recipe),
        "simple": simple,
        "harder": harder,
        "ingredient_groups": render_ingredient_groups(simple, harder),
    })
    return data
