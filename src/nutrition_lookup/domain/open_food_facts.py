"""Models for Open Food Facts search responses."""

from pydantic import BaseModel, ConfigDict, Field


class OffNutriments(BaseModel):
    """Per-100g nutriments of a product."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    energy_kcal_100g: float | None = Field(default=None, alias="energy-kcal_100g")
    carbohydrates_100g: float | None = None
    sugars_100g: float | None = None
    proteins_100g: float | None = None
    fat_100g: float | None = None
    fiber_100g: float | None = None
    sodium_100g: float | None = None

    def to_fields(self) -> dict[str, float | None]:
        """Convert to nutrient fields; sodium is reported in mg."""
        return {
            "calories": self.energy_kcal_100g,
            "carbs": self.carbohydrates_100g,
            "sugar": self.sugars_100g,
            "protein": self.proteins_100g,
            "fat": self.fat_100g,
            "fiber": self.fiber_100g,
            "sodium": None if self.sodium_100g is None else self.sodium_100g * 1000,
        }


class OffProduct(BaseModel):
    """Single product from a search."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    code: str | None = None
    product_name: str | None = None
    nutriments: OffNutriments | None = None


class OffSearchResponse(BaseModel):
    """Search response page."""

    model_config = ConfigDict(extra="ignore")

    products: list[OffProduct] = Field(default_factory=list)
    count: int = 0
    page: int = 1
    page_size: int = 20
