"""
Pick'em command line: view a tournament layout, your picks, your score,
your stickers and your fantasy lineup.

Credentials come from the environment (PICKEM_API_KEY, PICKEM_STEAM_ID,
PICKEM_AUTH_CODE) or a .env file.
"""
import argparse
import asyncio
import sys
import time
import uuid

from pickem.bracket import (
    get_accuracy_percentage,
    get_coin_tier,
    get_points_to_next_tier,
)
from pickem.client import create_client, load_bracket
from pickem.config import settings
from pickem.errors import convert_error
from pickem.exceptions import PickEmError
from pickem.models import (
    FantasyLineup,
    MatchGroup,
    TournamentItems,
    TournamentLayout,
    UserAuthParams,
)
from pickem.utils.logging import setup_logging
from pickem.utils.observability import CORRELATION_ID, Logger, initialize_observability
from pickem.validation import validate_user_auth_params

logger = Logger(__name__)


def _auth_params(event_id: int) -> UserAuthParams:
    if not settings.api.has_credentials:
        raise PickEmError(
            "Configuration not found. Set PICKEM_API_KEY, PICKEM_STEAM_ID and PICKEM_AUTH_CODE."
        )
    return UserAuthParams(
        event_id=event_id,
        steam_id=settings.api.steam_id,
        auth_code=settings.api.auth_code,
    )


async def _load(event_id: int):
    params = _auth_params(event_id)
    async with create_client() as client:
        return await load_bracket(client, params)


async def _fetch_items(event_id: int) -> TournamentItems:
    params = _auth_params(event_id)
    async with create_client() as client:
        return await client.get_tournament_items(params)


async def _fetch_fantasy(event_id: int) -> FantasyLineup:
    params = _auth_params(event_id)
    async with create_client() as client:
        return await client.get_fantasy_lineup(params)


def cmd_layout(args):
    """Print the bracket structure with resolved team names."""
    view = asyncio.run(_load(args.event_id))
    _print_layout(view.layout)


def cmd_view(args):
    """Print the bracket with the user's picks marked."""
    view = asyncio.run(_load(args.event_id))
    picks = {}
    for pred in view.predictions.predictions:
        picks.setdefault(pred.group_id, pred.pick)
    _print_layout(view.layout, picks)


def cmd_score(args):
    """Print points, accuracy and coin tier."""
    view = asyncio.run(_load(args.event_id))
    score = view.score
    tier = get_coin_tier(score.total_points)

    print(f"\n{'':=^60}")
    print(f"Score: {score.total_points}/{score.possible_points} points".center(60))
    print(f"Correct: {score.correct_predictions} | Accuracy: {get_accuracy_percentage(score)}%".center(60))
    print(f"Coin: {tier.value}".center(60))
    print(f"{'':=^60}\n")

    for section in score.section_scores:
        print(f"  {section.section_name:<30} {section.points:>4} pts  "
              f"{section.correct_picks}/{section.total_picks} correct")

    progress = get_points_to_next_tier(score.total_points)
    if progress is None:
        print("\n  Top tier reached.")
    else:
        print(f"\n  {progress.points_needed} more points for {progress.tier.value}.")


def cmd_validate(args):
    """Check the configured credentials without calling the API."""
    params = _auth_params(args.event_id)
    try:
        validate_user_auth_params(params)
    except Exception as e:
        raise convert_error(e) from e
    print("Credentials look valid.")


def cmd_items(args):
    """List the tournament stickers the user owns."""
    items = asyncio.run(_fetch_items(args.event_id))

    print("\nYour Tournament Stickers\n")
    if not items.items:
        print("No stickers owned for this tournament.")
        return

    teams = [i for i in items.items if i.type == "team"]
    players = [i for i in items.items if i.type == "player"]

    if teams:
        print("Team Stickers:")
        print(f"  {'Item ID':<20} {'Team ID':<15}")
        for item in teams:
            print(f"  {item.item_id:<20} {item.team_id if item.team_id is not None else '-':<15}")

    if players:
        print("\nPlayer Stickers:")
        print(f"  {'Item ID':<20} {'Player ID':<15}")
        for item in players:
            print(f"  {item.item_id:<20} {item.player_id if item.player_id is not None else '-':<15}")


def cmd_fantasy(args):
    """Show the fantasy lineup for each section."""
    lineup = asyncio.run(_fetch_fantasy(args.event_id))

    print("\nFantasy Team Lineup\n")
    if not lineup.teams:
        print("No fantasy lineup set.")
        return

    for team in lineup.teams:
        print(f"Section {team.section_id}:")
        if not team.picks:
            print("  No players selected")
            continue
        for idx, player_id in enumerate(team.picks, start=1):
            print(f"  {idx:>2}. Player {player_id}")

    print("\nUse the Steam client or CS2 in-game to modify your Fantasy lineup")


def _print_layout(layout: TournamentLayout, picks=None):
    for section in layout.sections:
        print(f"--- {section.name} ---")
        for group in section.groups:
            _print_group_line(group, picks)
        print()


def _print_group_line(group: MatchGroup, picks=None):
    """Print a single match group on one line."""
    pick = (picks or {}).get(group.group_id)
    winners = group.winning_ids

    if not group.has_result:
        status = "[open]" if group.picks_allowed else "[    ]"
    elif pick is None:
        status = "[ -- ]"
    elif pick in winners:
        status = "[ +  ]"
    else:
        status = "[ x  ]"

    names = []
    for team in group.teams:
        mark = "*" if team.pick_id in winners else " "
        chosen = "<<" if team.pick_id == pick else ""
        names.append(f"{mark}{team.name[:18]}{chosen}")

    print(f"  {status} {group.name:<16} {' vs '.join(names) or 'TBD'} ({group.points_per_pick} pt)")


def main(argv=None):
    parser = argparse.ArgumentParser(description="CS2 Pick'em client")
    subparsers = parser.add_subparsers(dest="command", required=True)

    layout = subparsers.add_parser("layout", help="View tournament bracket structure")
    layout.add_argument("event_id", type=int, help="Tournament event ID (e.g., 25 for Budapest 2025)")
    layout.set_defaults(func=cmd_layout)

    view = subparsers.add_parser("view", help="View your current predictions")
    view.add_argument("event_id", type=int, help="Tournament event ID")
    view.set_defaults(func=cmd_view)

    score = subparsers.add_parser("score", help="Calculate your current Pick'em score")
    score.add_argument("event_id", type=int, help="Tournament event ID")
    score.set_defaults(func=cmd_score)

    check = subparsers.add_parser("validate", help="Check configured credentials")
    check.add_argument("event_id", type=int, help="Tournament event ID")
    check.set_defaults(func=cmd_validate)

    items = subparsers.add_parser("items", help="List your owned tournament stickers")
    items.add_argument("event_id", type=int, help="Tournament event ID")
    items.set_defaults(func=cmd_items)

    fantasy = subparsers.add_parser("fantasy", help="View your Fantasy team lineup")
    fantasy.add_argument("event_id", type=int, help="Tournament event ID")
    fantasy.set_defaults(func=cmd_fantasy)

    args = parser.parse_args(argv)

    initialize_observability(
        environment=settings.observability.environment,
        log_level=settings.observability.log_level,
    )
    setup_logging(
        level=settings.observability.log_level,
        log_format=settings.observability.log_format,
    )

    correlation_id = str(uuid.uuid4())
    CORRELATION_ID.set(correlation_id)

    start_time = time.time()
    try:
        args.func(args)
    except PickEmError as e:
        logger.log_error("command_failed", command=args.command, error=e.message)
        print(f"Error: {e.message}")
        sys.exit(1)
    finally:
        logger.log_event("command_completed", duration_seconds=time.time() - start_time)


if __name__ == "__main__":
    main()
