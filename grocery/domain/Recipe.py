"""Recipe domain entity decoded from recipe API records (id, name, instructions, 20 ingredient/measure pairs)."""
from typing import List, Optional, Tuple

MAX_INGREDIENT_SLOTS = 20


class RecipeIngredient:
    def __init__(self, name: str = "", measure: str = ""):
        self.name = name
        self.measure = measure

    def __str__(self) -> str:
        return f"{self.name} ({self.measure})"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, RecipeIngredient):
            return NotImplemented
        return (self.name, self.measure) == (other.name, other.measure)

    def to_dict(self):
        return {"name": self.name, "measure": self.measure}


class Recipe:
    def __init__(self, id: str = "", name: str = "", instructions: str = "", image_url: str = "",
                 category: str = "", area: str = "", ingredients: Optional[List[RecipeIngredient]] = None):
        self.id = id
        self.name = name
        self.instructions = instructions
        self.image_url = image_url
        self.category = category
        self.area = area
        self.ingredients = ingredients[:] if ingredients else []

    def __str__(self) -> str:
        return f"{self.name} ({self.id}) - {len(self.ingredients)} ingredients"

    __repr__ = __str__

    @staticmethod
    def _text(value) -> str:
        return value.strip() if isinstance(value, str) else ""

    @classmethod
    def from_api(cls, meal: dict):
        '''Build a Recipe from one TheMealDB "meals" entry (strIngredientN / strMeasureN pairs).'''
        if not isinstance(meal, dict):
            raise ValueError("recipe record is not an object")
        ingredients = []
        for n in range(1, MAX_INGREDIENT_SLOTS + 1):
            name = cls._text(meal.get(f"strIngredient{n}"))
            if not name:
                continue
            ingredients.append(RecipeIngredient(name, cls._text(meal.get(f"strMeasure{n}"))))
        instructions = meal.get("strInstructions") or ""
        return cls(
            id=str(meal.get("idMeal") or ""),
            name=cls._text(meal.get("strMeal")),
            instructions=instructions.replace("\r\n", "\n"),
            image_url=cls._text(meal.get("strMealThumb")),
            category=cls._text(meal.get("strCategory")),
            area=cls._text(meal.get("strArea")),
            ingredients=ingredients,
        )

    def ingredient_pairs(self) -> List[Tuple[str, str]]:
        return [(i.name, i.measure) for i in self.ingredients]

    def ingredient_names(self) -> str:
        '''Comma separated ingredient names, the input of ingredient classification.'''
        return ", ".join(i.name for i in self.ingredients)

    def to_summary(self):
        return {"id": self.id, "name": self.name, "image_url": self.image_url}

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "instructions": self.instructions,
            "image_url": self.image_url,
            "category": self.category,
            "area": self.area,
            "ingredients": [i.to_dict() for i in self.ingredients],
        }
