"""Confidence scoring for matched nutrition results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConfidenceScorer:
    """Blends match quality, data completeness and parsing confidence."""

    match_weight: float = 0.7
    completeness_weight: float = 0.2
    parsing_weight: float = 0.1
    min_acceptance: float = 0.60
    high_confidence: float = 0.75

    def score(
        self,
        match_score: float,
        nutrition_completeness: float,
        parsing_confidence: float,
        cap: float | None = None,
    ) -> float:
        """Return a confidence in [0, cap]; ``cap=None`` means no source cap."""
        confidence = (
            self.match_weight * match_score
            + self.completeness_weight * nutrition_completeness
            + self.parsing_weight * parsing_confidence
        )
        upper = 1.0 if cap is None else min(cap, 1.0)
        return max(0.0, min(confidence, upper))

    def is_acceptable(self, confidence: float) -> bool:
        """Whether a result may be served to the caller."""
        return confidence >= self.min_acceptance

    def is_cacheable(self, confidence: float) -> bool:
        """Whether a result is strong enough to be persisted in the cache."""
        return confidence >= self.high_confidence
