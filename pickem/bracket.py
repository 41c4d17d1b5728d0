"""
Bracket scoring and coin tiers.

Scores a user's predictions against the results embedded in a tournament
layout. Groups without a result are ignored entirely; groups with a result
always count toward the points that were possible, whether or not the user
made a pick for them.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from pickem.config import settings
from pickem.models import Prediction, TournamentLayout, UserPredictions


@dataclass(frozen=True)
class SectionScore:
    section_id: int
    section_name: str
    points: int
    correct_picks: int
    total_picks: int  # resolved groups in the section


@dataclass(frozen=True)
class BracketScore:
    total_points: int
    correct_predictions: int
    possible_points: int
    section_scores: List[SectionScore] = field(default_factory=list)


def _first_pick_by_group(predictions: Iterable[Prediction]) -> Dict[int, int]:
    picks: Dict[int, int] = {}
    for pred in predictions:
        picks.setdefault(pred.group_id, pred.pick)
    return picks


def calculate_bracket_score(
    layout: TournamentLayout,
    predictions: Union[UserPredictions, Iterable[Prediction]],
) -> BracketScore:
    """
    Calculate points earned from user predictions.

    Args:
        layout: Tournament layout with results embedded in ``picks``
        predictions: The user's predictions; if a group has several, the
            first one counts

    Returns:
        BracketScore with overall totals and one entry per section that has
        at least one resolved group
    """
    if isinstance(predictions, UserPredictions):
        predictions = predictions.predictions
    picks_by_group = _first_pick_by_group(predictions)

    total_points = 0
    correct_predictions = 0
    possible_points = 0
    section_scores: List[SectionScore] = []

    for section in layout.sections:
        section_points = 0
        section_correct = 0
        section_total = 0

        for group in section.groups:
            if not group.has_result:
                continue

            possible_points += group.points_per_pick
            section_total += 1

            pick = picks_by_group.get(group.group_id)
            if pick is not None and pick in group.winning_ids:
                section_points += group.points_per_pick
                section_correct += 1

        if section_total > 0:
            total_points += section_points
            correct_predictions += section_correct
            section_scores.append(SectionScore(
                section_id=section.section_id,
                section_name=section.name,
                points=section_points,
                correct_picks=section_correct,
                total_picks=section_total,
            ))

    return BracketScore(
        total_points=total_points,
        correct_predictions=correct_predictions,
        possible_points=possible_points,
        section_scores=section_scores,
    )


def get_accuracy_percentage(score: BracketScore) -> int:
    """Share of possible points earned, rounded half up; 0 when nothing is resolved."""
    if score.possible_points == 0:
        return 0
    return math.floor(100 * score.total_points / score.possible_points + 0.5)


# =============================================================================
# COIN TIERS
# =============================================================================

class CoinTier(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    DIAMOND = "Diamond"


@dataclass(frozen=True)
class TierThresholds:
    """Minimum points for each tier above Bronze. Must be strictly ascending."""
    silver: int = 50
    gold: int = 75
    diamond: int = 100

    def __post_init__(self):
        if not 0 < self.silver < self.gold < self.diamond:
            raise ValueError(
                f"tier thresholds must be ascending, got {self.silver}/{self.gold}/{self.diamond}"
            )

    @classmethod
    def from_settings(cls) -> "TierThresholds":
        return cls(settings.tiers.silver, settings.tiers.gold, settings.tiers.diamond)

    def bands(self) -> List[Tuple[CoinTier, int]]:
        """(tier, minimum points) pairs, lowest band first."""
        return [
            (CoinTier.BRONZE, 0),
            (CoinTier.SILVER, self.silver),
            (CoinTier.GOLD, self.gold),
            (CoinTier.DIAMOND, self.diamond),
        ]


@dataclass(frozen=True)
class TierProgress:
    tier: CoinTier
    points_needed: int


def _band_index(points: int, bands: List[Tuple[CoinTier, int]]) -> int:
    index = 0
    for i, (_, minimum) in enumerate(bands):
        if points >= minimum:
            index = i
    return index


def get_coin_tier(points: int, thresholds: Optional[TierThresholds] = None) -> CoinTier:
    """Tier for a point total. Thresholds default to configuration."""
    bands = (thresholds or TierThresholds.from_settings()).bands()
    return bands[_band_index(points, bands)][0]


def get_points_to_next_tier(
    points: int,
    thresholds: Optional[TierThresholds] = None,
) -> Optional[TierProgress]:
    """
    Points still needed to reach the next tier.

    Returns:
        The next tier and the gap to its minimum, or None when already in
        the top tier
    """
    bands = (thresholds or TierThresholds.from_settings()).bands()
    index = _band_index(points, bands)
    if index == len(bands) - 1:
        return None
    next_tier, minimum = bands[index + 1]
    return TierProgress(tier=next_tier, points_needed=minimum - points)
