"""Nutrition domain models."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from pydantic import BaseModel

NUTRIENT_UNITS: dict[str, str] = {
    "calories": "kcal",
    "carbs": "g",
    "protein": "g",
    "fat": "g",
    "fiber": "g",
    "sugar": "g",
    "sodium": "mg",
}

_REQUIRED_NUTRIENTS = ("calories", "carbs", "protein", "fat")
_OPTIONAL_NUTRIENTS = ("fiber", "sugar", "sodium")

NutrientFields = Mapping[str, float | None]


@dataclass(frozen=True)
class NutritionRange:
    """Min/max range for one nutrient; values are never negative."""

    min: float
    max: float
    unit: str

    def __post_init__(self) -> None:
        safe_min = max(0.0, float(self.min))
        object.__setattr__(self, "min", safe_min)
        object.__setattr__(self, "max", max(safe_min, float(self.max)))

    @classmethod
    def point(cls, value: float, unit: str) -> "NutritionRange":
        """Create a range with identical bounds."""
        return cls(min=value, max=value, unit=unit)

    @property
    def average(self) -> float:
        """Midpoint of the range."""
        return (self.min + self.max) / 2


def _zero(name: str) -> NutritionRange:
    return NutritionRange.point(0.0, NUTRIENT_UNITS[name])


@dataclass(frozen=True)
class NutritionEstimate:
    """Per-nutrient ranges with a completeness score in [0, 1]."""

    calories: NutritionRange = field(default_factory=lambda: _zero("calories"))
    carbs: NutritionRange = field(default_factory=lambda: _zero("carbs"))
    protein: NutritionRange = field(default_factory=lambda: _zero("protein"))
    fat: NutritionRange = field(default_factory=lambda: _zero("fat"))
    fiber: NutritionRange | None = None
    sugar: NutritionRange | None = None
    sodium: NutritionRange | None = None
    completeness_score: float = 0.0
    sample_count: int = 0

    @classmethod
    def empty(cls) -> "NutritionEstimate":
        """Return the zero estimate used for unavailable results."""
        return cls()

    @classmethod
    def from_fields(cls, fields: NutrientFields) -> "NutritionEstimate":
        """Build point ranges from a single set of nutrient fields."""
        return cls.from_samples([fields])

    @classmethod
    def from_samples(cls, samples: Sequence[NutrientFields]) -> "NutritionEstimate":
        """Build min/max ranges across several matched nutrient samples."""
        if not samples:
            return cls.empty()
        ranges: dict[str, NutritionRange | None] = {}
        for name in (*_REQUIRED_NUTRIENTS, *_OPTIONAL_NUTRIENTS):
            values = [
                float(sample[name])
                for sample in samples
                if sample.get(name) is not None
            ]
            if values:
                ranges[name] = NutritionRange(
                    min=min(values), max=max(values), unit=NUTRIENT_UNITS[name]
                )
            elif name in _REQUIRED_NUTRIENTS:
                ranges[name] = _zero(name)
            else:
                ranges[name] = None
        completeness = sum(completeness_of(sample) for sample in samples) / len(
            samples
        )
        return cls(
            **ranges,  # type: ignore[arg-type]
            completeness_score=completeness,
            sample_count=len(samples),
        )


def completeness_of(fields: NutrientFields) -> float:
    """Return the fraction of expected nutrient fields present."""
    present = 0
    for name in NUTRIENT_UNITS:
        value = fields.get(name)
        if value is None:
            continue
        if name == "calories" and value <= 0:
            continue
        present += 1
    return present / len(NUTRIENT_UNITS)


def has_calories(fields: NutrientFields) -> bool:
    """Return True if the fields carry a positive calorie value."""
    calories = fields.get("calories")
    return calories is not None and calories > 0


@dataclass(frozen=True)
class ScoredResult:
    """Outcome of a name lookup; unavailable results carry zero confidence."""

    original_input: str
    cleaned_query: str
    matched_key: str
    matched_name: str
    source_id: str
    nutrition: NutritionEstimate
    match_score: float
    confidence: float
    is_available: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @classmethod
    def unavailable(
        cls, original_input: str, source_id: str = ""
    ) -> "ScoredResult":
        """Return the explicit "no nutrition data" result."""
        return cls(
            original_input=original_input,
            cleaned_query="",
            matched_key="",
            matched_name="",
            source_id=source_id,
            nutrition=NutritionEstimate.empty(),
            match_score=0.0,
            confidence=0.0,
            is_available=False,
        )


class CachedResultRecord(BaseModel):
    """Flat persisted form of a cached lookup result."""

    key: str
    result: ScoredResult
    timestamp: datetime
