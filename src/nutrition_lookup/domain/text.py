"""Parsed food text models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CoreFoodTerms:
    """Primary food, modifiers and side items extracted from a menu line."""

    primary_food: str
    modifiers: tuple[str, ...]
    accompaniments: frozenset[str]
    removed_text: tuple[str, ...]
    confidence: float
    cleaned_text: str = ""
