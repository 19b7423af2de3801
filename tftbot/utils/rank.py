"""
Rank linearization utilities.

Converts a ranked (tier, division, LP) triple into a single "total LP" integer
that increases monotonically with rank quality, and back. The total is what the
climb graph plots; the triple is what players read.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class Tier(Enum):
    """Ranked tiers, lowest first."""
    IRON = "IRON"
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    EMERALD = "EMERALD"
    DIAMOND = "DIAMOND"
    MASTER = "MASTER"
    GRANDMASTER = "GRANDMASTER"
    CHALLENGER = "CHALLENGER"

    @property
    def is_apex(self) -> bool:
        return self in APEX_TIERS

    @property
    def index(self) -> int:
        return TIER_ORDER.index(self)


class Division(Enum):
    """Divisions within a tier, lowest first."""
    IV = "IV"
    III = "III"
    II = "II"
    I = "I"

    @property
    def index(self) -> int:
        return DIVISION_ORDER.index(self)


TIER_ORDER: Tuple[Tier, ...] = tuple(Tier)
DIVISION_ORDER: Tuple[Division, ...] = tuple(Division)
APEX_TIERS = frozenset({Tier.MASTER, Tier.GRANDMASTER, Tier.CHALLENGER})

# LP a non-apex division can hold before promotion
MAX_DIVISION_POINTS = 99

_STANDARD_DIVISIONS = {
    Division.IV: 0,
    Division.III: 100,
    Division.II: 200,
    Division.I: 300,
}
_APEX_DIVISIONS = {Division.I: 0}

# tier -> (base offset, {division: offset within tier})
RANK_TABLE: Dict[Tier, Tuple[int, Dict[Division, int]]] = {
    Tier.IRON: (0, _STANDARD_DIVISIONS),
    Tier.BRONZE: (400, _STANDARD_DIVISIONS),
    Tier.SILVER: (800, _STANDARD_DIVISIONS),
    Tier.GOLD: (1200, _STANDARD_DIVISIONS),
    Tier.PLATINUM: (1600, _STANDARD_DIVISIONS),
    Tier.EMERALD: (2000, _STANDARD_DIVISIONS),
    Tier.DIAMOND: (2400, _STANDARD_DIVISIONS),
    Tier.MASTER: (2800, _APEX_DIVISIONS),
    Tier.GRANDMASTER: (2900, _APEX_DIVISIONS),
    Tier.CHALLENGER: (3000, _APEX_DIVISIONS),
}


@dataclass(frozen=True)
class RankPoint:
    """A ranked position: tier, division and LP inside the division."""
    tier: Tier
    division: Division
    points: int

    def __post_init__(self):
        if self.division not in RANK_TABLE[self.tier][1]:
            raise ValueError(f"{self.tier.value} has no division {self.division.value}")
        if self.points < 0:
            raise ValueError(f"LP must be non-negative, got {self.points}")

    @classmethod
    def from_strings(cls, tier: str, division: str, points: int) -> "RankPoint":
        """
        Build a RankPoint from the strings used by the league API.

        Raises:
            ValueError: If the tier or division is unknown
        """
        try:
            parsed_tier = Tier(tier.upper())
            parsed_division = Division(division.upper())
        except (ValueError, AttributeError) as e:
            raise ValueError(f"Unknown rank {tier} {division}") from e
        return cls(parsed_tier, parsed_division, int(points))

    @property
    def order_key(self) -> Tuple[int, int, int]:
        """Sort key: tier, then division, then LP."""
        return (self.tier.index, self.division.index, self.points)

    def __str__(self) -> str:
        return format_rank(self)


def to_total(rank: RankPoint) -> int:
    """Linearize a rank: tier base + division offset + LP."""
    base, divisions = RANK_TABLE[rank.tier]
    return base + divisions[rank.division] + rank.points


def from_total(total: int) -> RankPoint:
    """
    Inverse of ``to_total``.

    Picks the tier/division whose base + offset is the greatest value not
    above ``total``. LP inside non-apex tiers is clamped to 99; apex tiers keep
    the raw residual. Totals below the ladder floor map to IRON IV 0 LP.
    """
    total = int(total)
    for tier in reversed(TIER_ORDER):
        base, divisions = RANK_TABLE[tier]
        if total < base:
            continue
        lp_in_tier = total - base
        for division, offset in sorted(divisions.items(), key=lambda item: item[1], reverse=True):
            if lp_in_tier >= offset:
                points = lp_in_tier - offset
                if not tier.is_apex:
                    points = min(points, MAX_DIVISION_POINTS)
                return RankPoint(tier, division, points)
    return RankPoint(Tier.IRON, Division.IV, 0)


def format_rank(rank: RankPoint) -> str:
    """Format as 'GOLD II - 40 LP' (apex tiers omit the division)."""
    if rank.tier.is_apex:
        return f"{rank.tier.value} - {rank.points} LP"
    return f"{rank.tier.value} {rank.division.value} - {rank.points} LP"


def short_label(rank: RankPoint) -> str:
    """Compact axis label, e.g. 'GOL II'."""
    return f"{rank.tier.value[:3]} {rank.division.value}"
