"""Daily macro targets derived from a profile."""

from meal_tracker.domain.nutrition import MacroTargets, ProteinFood
from meal_tracker.domain.profiles import ActivityLevel, Profile

DEFAULT_TARGETS = MacroTargets(protein_g=150, carbs_g=200, fat_g=60)

PROTEIN_PER_KG: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 0.8,
    ActivityLevel.LIGHTLY_ACTIVE: 1.2,
    ActivityLevel.MODERATELY_ACTIVE: 1.6,
    ActivityLevel.VERY_ACTIVE: 2.0,
    ActivityLevel.EXTREMELY_ACTIVE: 2.2,
}
DEFAULT_PROTEIN_PER_KG = PROTEIN_PER_KG[ActivityLevel.MODERATELY_ACTIVE]
FAT_PER_KG = 1.0

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

BASELINE_PROTEIN_PER_KG = 0.8
BASELINE_PROTEIN_G = 56

PROTEIN_RICH_FOODS = (
    ProteinFood(name="Paneer (100g)", protein="~18g protein"),
    ProteinFood(name="Dal/Lentils (1 cup)", protein="~18g protein"),
    ProteinFood(name="Chickpeas (1 cup)", protein="~15g protein"),
    ProteinFood(name="Greek Yogurt (1 cup)", protein="~20g protein"),
    ProteinFood(name="Eggs (2 large)", protein="~12g protein"),
    ProteinFood(name="Chicken Breast (100g)", protein="~31g protein"),
)


def protein_multiplier(activity_level: ActivityLevel | str | None) -> float:
    """Return grams of protein per kg for an activity level.

    Missing or unrecognized levels use the moderately active multiplier.
    """
    level = ActivityLevel.parse(activity_level)
    if level is None:
        return DEFAULT_PROTEIN_PER_KG
    return PROTEIN_PER_KG[level]


def calculate_macro_targets(profile: Profile) -> MacroTargets:
    """Compute daily protein, carbs and fat targets.

    Protein and fat scale with body weight; carbs take whatever calories
    remain of the daily goal and can come out zero or negative for a low goal.
    Rounding is Python's half-to-even ``round``.
    """
    if not profile.weight_kg:
        return DEFAULT_TARGETS
    weight = profile.weight_kg
    protein = round(weight * protein_multiplier(profile.activity_level))
    fat = round(weight * FAT_PER_KG)
    remaining = (
        profile.daily_calorie_goal
        - protein * KCAL_PER_G_PROTEIN
        - fat * KCAL_PER_G_FAT
    )
    carbs = round(remaining / KCAL_PER_G_CARBS)
    return MacroTargets(protein_g=protein, carbs_g=carbs, fat_g=fat)


def baseline_protein_recommendation(weight_kg: float | None) -> int:
    """Return the general 0.8 g/kg adult guideline, or 56 g without a weight."""
    if not weight_kg:
        return BASELINE_PROTEIN_G
    return round(weight_kg * BASELINE_PROTEIN_PER_KG)
