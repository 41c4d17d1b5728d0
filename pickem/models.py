"""
Data model for tournament layouts, predictions, items and inventory.

Response models parse the Steam Web API payloads directly: field aliases
match the upstream keys (``sectionid``, ``points_per_pick``, ...) while the
Python attributes use snake_case. Models are frozen; nothing in the engine
mutates them. No range constraints are applied here because partial and odd
upstream data is normal.
"""
from dataclasses import dataclass, field
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


# =============================================================================
# TOURNAMENT LAYOUT
# =============================================================================

class Team(_Model):
    """A pickable outcome. ``name`` may be a placeholder until resolved."""
    pick_id: int = Field(alias="pickid")
    name: str = ""


class Pick(_Model):
    """Authoritative result for one slot of a match group."""
    index: int = 0
    pick_ids: List[int] = Field(default_factory=list, alias="pickids")


class MatchGroup(_Model):
    group_id: int = Field(alias="groupid")
    name: str = ""
    points_per_pick: int = 0
    picks_allowed: bool = False
    teams: List[Team] = Field(default_factory=list)
    picks: Optional[List[Pick]] = None

    @field_validator("teams", mode="before")
    @classmethod
    def _null_teams(cls, v):
        return [] if v is None else v

    @property
    def has_result(self) -> bool:
        return bool(self.picks)

    @property
    def winning_ids(self) -> frozenset:
        """Union of winning pick ids across all result slots."""
        return frozenset(pid for pick in self.picks or () for pid in pick.pick_ids)


class TournamentSection(_Model):
    section_id: int = Field(alias="sectionid")
    name: str = ""
    groups: List[MatchGroup] = Field(default_factory=list)


class TournamentLayout(_Model):
    """Ordered sections of a tournament. Section ids are unique."""
    sections: List[TournamentSection] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_sections(self):
        seen = set()
        for section in self.sections:
            if section.section_id in seen:
                raise ValueError(f"duplicate section id {section.section_id}")
            seen.add(section.section_id)
        return self


# =============================================================================
# PREDICTIONS
# =============================================================================

class Prediction(_Model):
    group_id: int = Field(alias="groupid")
    pick: int


class UserPredictions(_Model):
    predictions: List[Prediction] = Field(default_factory=list)


# =============================================================================
# ITEMS & INVENTORY
# =============================================================================

class TournamentItem(_Model):
    """A claimable sticker/item the user owns for this tournament."""
    item_id: str = Field(alias="itemid")
    type: Literal["team", "player"]
    team_id: Optional[int] = Field(default=None, alias="teamid")
    player_id: Optional[int] = Field(default=None, alias="playerid")

    @field_validator("item_id", mode="before")
    @classmethod
    def _item_id_str(cls, v):
        return str(v)


class TournamentItems(_Model):
    items: List[TournamentItem] = Field(default_factory=list)


class InventoryAsset(_Model):
    appid: int = 730
    contextid: str = "2"
    assetid: str
    classid: str
    instanceid: str = "0"
    amount: str = "1"


class InventoryDescription(_Model):
    appid: int = 730
    classid: str
    instanceid: str = "0"
    name: str = ""
    market_name: str = ""
    market_hash_name: str = ""
    type: str = ""
    tradable: int = 0


class SteamInventory(_Model):
    """Raw inventory: assets and descriptions joined by (classid, instanceid)."""
    assets: List[InventoryAsset] = Field(default_factory=list)
    descriptions: List[InventoryDescription] = Field(default_factory=list)
    total_inventory_count: int = 0
    success: int = 1

    @field_validator("assets", "descriptions", mode="before")
    @classmethod
    def _null_list(cls, v):
        return [] if v is None else v

    @classmethod
    def empty(cls) -> "SteamInventory":
        return cls()


# =============================================================================
# FANTASY & UPLOAD RESULTS
# =============================================================================

class FantasyTeam(_Model):
    section_id: int = Field(alias="sectionid")
    picks: List[int] = Field(default_factory=list)


class FantasyLineup(_Model):
    teams: List[FantasyTeam] = Field(default_factory=list)


class UploadResult(_Model):
    itemid: Optional[str] = None
    itemid0: Optional[str] = None
    itemid1: Optional[str] = None
    itemid2: Optional[str] = None
    itemid3: Optional[str] = None
    itemid4: Optional[str] = None


# =============================================================================
# REQUEST PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class UserAuthParams:
    event_id: int
    steam_id: str
    auth_code: str


@dataclass(frozen=True)
class PredictionUpload:
    section_id: int
    group_id: int
    index: int
    pick_id: int
    item_id: str


@dataclass(frozen=True)
class UploadPredictionParams(UserAuthParams):
    section_id: int
    group_id: int
    index: int
    pick_id: int
    item_id: str


@dataclass(frozen=True)
class UploadMultipleParams(UserAuthParams):
    predictions: List[PredictionUpload] = field(default_factory=list)


@dataclass(frozen=True)
class LineupEntry:
    pick_id: int
    item_id: str


@dataclass(frozen=True)
class UploadLineupParams(UserAuthParams):
    section_id: int
    lineup: List[LineupEntry] = field(default_factory=list)
