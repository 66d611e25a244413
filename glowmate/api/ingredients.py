"""Ingredient API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from glowmate.api.dependencies import get_ingredient_service
from glowmate.schemas.product import IngredientSuggestion
from glowmate.services.ingredients import IngredientService

router = APIRouter(prefix="/api/v1/ingredients", tags=["ingredients"])


@router.get("/suggest", response_model=list[IngredientSuggestion])
def suggest_ingredients(
    q: Annotated[str, Query(min_length=1, max_length=100)],
    ingredient_service: Annotated[IngredientService, Depends(get_ingredient_service)],
    limit: Annotated[int, Query(ge=1)] = 10,
):
    """Autocomplete ingredient names; at most 20 suggestions are returned."""
    return [IngredientSuggestion.from_ingredient(i) for i in ingredient_service.suggest(q, limit)]
