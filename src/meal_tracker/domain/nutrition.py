"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutritionVector:
    """Calories and macronutrient grams for a meal or a group of meals."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float = 0.0

    @classmethod
    def zero(cls) -> "NutritionVector":
        """Return the additive identity."""
        return cls(calories=0.0, protein_g=0.0, carbs_g=0.0, fat_g=0.0, fiber_g=0.0)

    def __add__(self, other: "NutritionVector") -> "NutritionVector":
        return NutritionVector(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
            fiber_g=self.fiber_g + other.fiber_g,
        )

    def scaled(self, factor: float) -> "NutritionVector":
        """Multiply every component by ``factor``."""
        return NutritionVector(
            calories=self.calories * factor,
            protein_g=self.protein_g * factor,
            carbs_g=self.carbs_g * factor,
            fat_g=self.fat_g * factor,
            fiber_g=self.fiber_g * factor,
        )

    def as_dict(self) -> dict[str, float]:
        """Return the vector as a plain mapping."""
        return {
            "calories": self.calories,
            "protein_g": self.protein_g,
            "carbs_g": self.carbs_g,
            "fat_g": self.fat_g,
            "fiber_g": self.fiber_g,
        }


@dataclass(frozen=True)
class MacroTargets:
    """Daily macronutrient goals in grams."""

    protein_g: int
    carbs_g: int
    fat_g: int


@dataclass(frozen=True)
class ProteinFood:
    """A protein-rich food suggestion."""

    name: str
    protein: str
