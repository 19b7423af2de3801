"""
Riot API record models.

Immutable records for each upstream endpoint response. ``from_json`` validates
required fields at the boundary and raises RecordParseError instead of letting
missing keys propagate as ``None`` deeper into the bot.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from tftbot.utils.exceptions import RecordParseError


def _require(payload: Any, key: str, expected: type, record: str):
    """Fetch a required field and check its type."""
    if not isinstance(payload, dict):
        raise RecordParseError(record, key, "parent is not an object")
    if key not in payload or payload[key] is None:
        raise RecordParseError(record, key)
    value = payload[key]
    # bool is an int subclass; a flag where a number belongs is malformed
    if expected is int and isinstance(value, bool):
        raise RecordParseError(record, key, f"expected int, got {type(value).__name__}")
    if not isinstance(value, expected):
        raise RecordParseError(record, key, f"expected {expected.__name__}, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class RiotAccount:
    """account-v1 response."""
    puuid: str
    game_name: str
    tag_line: str

    @property
    def riot_id(self) -> str:
        return f"{self.game_name}#{self.tag_line}"

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "RiotAccount":
        return cls(
            puuid=_require(payload, "puuid", str, "account"),
            game_name=_require(payload, "gameName", str, "account"),
            tag_line=_require(payload, "tagLine", str, "account"),
        )


@dataclass(frozen=True)
class Summoner:
    """tft-summoner-v1 response."""
    puuid: str
    profile_icon_id: int
    summoner_level: int = 0

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "Summoner":
        level = payload.get("summonerLevel", 0) if isinstance(payload, dict) else 0
        return cls(
            puuid=_require(payload, "puuid", str, "summoner"),
            profile_icon_id=_require(payload, "profileIconId", int, "summoner"),
            summoner_level=level if isinstance(level, int) else 0,
        )


@dataclass(frozen=True)
class LeagueEntry:
    """One queue entry of tft-league-v1."""
    queue_type: str
    tier: str
    rank: str
    league_points: int
    wins: int = 0
    losses: int = 0

    @property
    def display(self) -> str:
        return f"{self.tier} {self.rank} - {self.league_points} LP"

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "LeagueEntry":
        return cls(
            queue_type=_require(payload, "queueType", str, "league entry"),
            tier=_require(payload, "tier", str, "league entry"),
            rank=_require(payload, "rank", str, "league entry"),
            league_points=_require(payload, "leaguePoints", int, "league entry"),
            wins=payload.get("wins", 0) or 0,
            losses=payload.get("losses", 0) or 0,
        )


@dataclass(frozen=True)
class UnitRecord:
    character_id: str
    tier: int
    item_names: Tuple[str, ...] = ()

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "UnitRecord":
        return cls(
            character_id=_require(payload, "character_id", str, "unit"),
            tier=_require(payload, "tier", int, "unit"),
            item_names=tuple(payload.get("itemNames") or ()),
        )


@dataclass(frozen=True)
class TraitRecord:
    name: str
    num_units: int
    tier_current: int

    @property
    def clean_name(self) -> str:
        """Strip set prefixes like 'TFT16_' or 'Set16_'."""
        prefix, _, rest = self.name.partition('_')
        if rest and (prefix.startswith('TFT') or prefix.startswith('Set')):
            return rest
        return self.name

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "TraitRecord":
        return cls(
            name=_require(payload, "name", str, "trait"),
            num_units=_require(payload, "num_units", int, "trait"),
            tier_current=_require(payload, "tier_current", int, "trait"),
        )


@dataclass(frozen=True)
class MatchParticipant:
    """A single player's line in a match."""
    puuid: str
    placement: int
    level: int = 0
    players_eliminated: int = 0
    total_damage_to_players: int = 0
    units: Tuple[UnitRecord, ...] = ()
    traits: Tuple[TraitRecord, ...] = ()

    @property
    def active_traits(self) -> List[TraitRecord]:
        return [t for t in self.traits if t.tier_current > 0]

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "MatchParticipant":
        return cls(
            puuid=_require(payload, "puuid", str, "participant"),
            placement=_require(payload, "placement", int, "participant"),
            level=payload.get("level", 0) or 0,
            players_eliminated=payload.get("players_eliminated", 0) or 0,
            total_damage_to_players=payload.get("total_damage_to_players", 0) or 0,
            units=tuple(UnitRecord.from_json(u) for u in payload.get("units") or ()),
            traits=tuple(TraitRecord.from_json(t) for t in payload.get("traits") or ()),
        )


@dataclass(frozen=True)
class MatchDetail:
    """tft-match-v1 match response."""
    match_id: str
    game_datetime: int  # epoch millis
    game_type: str
    participants: Tuple[MatchParticipant, ...] = field(default_factory=tuple)
    queue_id: Optional[int] = None

    @property
    def is_double_up(self) -> bool:
        return self.game_type == "pairs"

    def participant(self, puuid: str) -> Optional[MatchParticipant]:
        return next((p for p in self.participants if p.puuid == puuid), None)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "MatchDetail":
        metadata = _require(payload, "metadata", dict, "match")
        info = _require(payload, "info", dict, "match")
        participants = _require(info, "participants", list, "match info")
        queue_id = info.get("queue_id")
        return cls(
            match_id=_require(metadata, "match_id", str, "match metadata"),
            game_datetime=_require(info, "game_datetime", int, "match info"),
            game_type=_require(info, "tft_game_type", str, "match info"),
            participants=tuple(MatchParticipant.from_json(p) for p in participants),
            queue_id=queue_id if isinstance(queue_id, int) else None,
        )
