"""Ingredient autocomplete."""

from sqlalchemy.orm import Session

from glowmate.models.product import Ingredient

MAX_SUGGESTIONS = 20


class IngredientService:
    def __init__(self, db: Session):
        self.db = db

    def suggest(self, q: str, limit: int = 10) -> list[Ingredient]:
        """Ingredients whose name contains ``q`` (case-insensitive), alphabetically."""
        return (
            self.db.query(Ingredient)
            .filter(Ingredient.name.ilike(f"%{q}%"))
            .order_by(Ingredient.name.asc())
            .limit(min(limit, MAX_SUGGESTIONS))
            .all()
        )
