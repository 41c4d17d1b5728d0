"""
Team name reconciliation.

The layout endpoint often returns placeholder team names. Real names are
recovered by joining three sources: a caller-supplied override table, the
user's claimable tournament items, and the user's inventory, where sticker
market names look like ``"Sticker | Team Name | Event 2025"``.
"""
from typing import Dict, Mapping, Optional, Tuple

from pickem.models import (
    MatchGroup,
    SteamInventory,
    Team,
    TournamentItem,
    TournamentItems,
    TournamentLayout,
)

UNKNOWN_TEAM = "Unknown"
MARKET_NAME_SEPARATOR = " | "


def build_asset_names(inventory: SteamInventory) -> Dict[str, str]:
    """
    Map asset id to market name.

    Assets and descriptions arrive as separate lists; they are joined on the
    (classid, instanceid) pair. Assets without a description are left out.
    """
    class_by_asset: Dict[str, Tuple[str, str]] = {
        asset.assetid: (asset.classid, asset.instanceid) for asset in inventory.assets
    }
    name_by_class: Dict[Tuple[str, str], str] = {
        (desc.classid, desc.instanceid): desc.market_name for desc in inventory.descriptions
    }

    names = {}
    for asset_id, key in class_by_asset.items():
        name = name_by_class.get(key)
        if name:
            names[asset_id] = name
    return names


def extract_team_name(market_name: str) -> str:
    """Second segment of a ``kind | team | event`` market name, else the name itself."""
    parts = market_name.split(MARKET_NAME_SEPARATOR)
    if len(parts) >= 2:
        return parts[1]
    return market_name


def _is_known(name: Optional[str]) -> bool:
    return bool(name) and name.strip().lower() != UNKNOWN_TEAM.lower()


def resolve_team_name(
    team: Team,
    items_by_team: Mapping[int, TournamentItem],
    asset_names: Mapping[str, str],
    team_names: Optional[Mapping[int, str]] = None,
) -> str:
    """
    Best available display name for one team.

    Order: override table, then the owned team item looked up in the
    inventory. Whenever a step has nothing, the original name is kept.
    """
    if team_names:
        override = team_names.get(team.pick_id)
        if _is_known(override):
            return override

    item = items_by_team.get(team.pick_id)
    if item is None:
        return team.name

    market_name = asset_names.get(item.item_id)
    if not market_name:
        return team.name

    return extract_team_name(market_name)


def _enrich_group(group: MatchGroup, resolve) -> MatchGroup:
    teams = [team.model_copy(update={"name": resolve(team)}) for team in group.teams]
    return group.model_copy(update={"teams": teams})


def enrich_layout(
    layout: TournamentLayout,
    items: TournamentItems,
    inventory: SteamInventory,
    team_names: Optional[Mapping[int, str]] = None,
) -> TournamentLayout:
    """
    Return a copy of ``layout`` with team names resolved where possible.

    The result has exactly the same sections, groups and teams as the input;
    only names change. Inputs are not modified.

    Args:
        layout: Layout as returned by the API
        items: The user's claimable tournament items
        inventory: The user's raw inventory
        team_names: Optional pick id -> name overrides, checked first

    Returns:
        New TournamentLayout
    """
    items_by_team: Dict[int, TournamentItem] = {}
    for item in items.items:
        if item.type == "team" and item.team_id is not None:
            items_by_team.setdefault(item.team_id, item)
    asset_names = build_asset_names(inventory)

    def resolve(team: Team) -> str:
        return resolve_team_name(team, items_by_team, asset_names, team_names)

    sections = [
        section.model_copy(update={"groups": [_enrich_group(g, resolve) for g in section.groups]})
        for section in layout.sections
    ]
    return layout.model_copy(update={"sections": sections})
