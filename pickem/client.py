"""
Steam CS2 Pick'em API client.

Each method validates its arguments, sends the request through the retry
scheduler, and transcodes the raw response into ``pickem.models`` types.
Internal failures are converted to ``PickEmError`` before leaving the client.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

from pickem.bracket import BracketScore, calculate_bracket_score
from pickem.config import Settings, settings as default_settings
from pickem.errors import ApiError, convert_error
from pickem.exceptions import PickEmError
from pickem.http.client import AsyncHttpClient
from pickem.http.rate_limiter import RetryPolicy, with_retry
from pickem.models import (
    FantasyLineup,
    SteamInventory,
    TournamentItems,
    TournamentLayout,
    UploadLineupParams,
    UploadMultipleParams,
    UploadPredictionParams,
    UploadResult,
    UserAuthParams,
    UserPredictions,
)
from pickem.reconcile import enrich_layout
from pickem.utils.observability import Logger
from pickem.validation import (
    validate_event_id,
    validate_steam_id,
    validate_upload_lineup_params,
    validate_upload_multiple_params,
    validate_upload_prediction_params,
    validate_user_auth_params,
)

logger = Logger(__name__)

T = TypeVar("T")

DEFAULT_BASE_URL = "https://api.steampowered.com"
DEFAULT_INVENTORY_URL = "https://steamcommunity.com/inventory"

LAYOUT_ENDPOINT = "/ICSGOTournaments_730/GetTournamentLayout/v1"
PREDICTIONS_ENDPOINT = "/ICSGOTournaments_730/GetTournamentPredictions/v1"
UPLOAD_PREDICTIONS_ENDPOINT = "/ICSGOTournaments_730/UploadTournamentPredictions/v1"
ITEMS_ENDPOINT = "/ICSGOTournaments_730/GetTournamentItems/v1"
FANTASY_ENDPOINT = "/ICSGOTournaments_730/GetTournamentFantasyLineup/v1"
UPLOAD_FANTASY_ENDPOINT = "/ICSGOTournaments_730/UploadTournamentFantasyLineup/v1"

CS2_APP_ID = 730
INVENTORY_CONTEXT_ID = 2


def _result(raw: Any) -> Dict[str, Any]:
    """Unwrap the ``{"result": {...}}`` envelope Steam puts around every payload."""
    if isinstance(raw, dict) and isinstance(raw.get("result"), dict):
        return raw["result"]
    return {}


def _normalize_predictions(result: Dict[str, Any]) -> Dict[str, Any]:
    # The endpoint answers with either "predictions" or "picks".
    if "predictions" in result:
        return {"predictions": result["predictions"] or []}
    return {"predictions": result.get("picks") or []}


class PickEmClient:
    """
    Async client for the tournament endpoints of the Steam Web API.

    Example:
        async with PickEmClient(api_key="...") as client:
            layout = await client.get_tournament_layout(25)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        inventory_url: str = DEFAULT_INVENTORY_URL,
        http: Optional[AsyncHttpClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        """
        Args:
            api_key: Steam Web API key
            base_url: API root, without trailing slash
            inventory_url: Community inventory root
            http: Transport; a default ``AsyncHttpClient`` is created if omitted
            retry_policy: Policy for rate-limited calls
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.inventory_url = inventory_url.rstrip("/")
        self.http = http or AsyncHttpClient()
        self.retry_policy = retry_policy or RetryPolicy()

    async def __aenter__(self) -> "PickEmClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    async def _call(self, validate: Callable[[], None], operation: Callable[[], Awaitable[T]]) -> T:
        try:
            validate()
            return await with_retry(operation, self.retry_policy)
        except Exception as e:
            raise convert_error(e) from e

    def _auth_params(self, params: UserAuthParams) -> Dict[str, str]:
        return {
            "key": self.api_key,
            "event": str(params.event_id),
            "steamid": params.steam_id,
            "steamidkey": params.auth_code,
        }

    # -------------------------------------------------------------------------
    # Layout & predictions
    # -------------------------------------------------------------------------

    async def get_tournament_layout(self, event_id: int) -> TournamentLayout:
        """Fetch sections, groups, teams and any known results for an event."""
        async def fetch():
            raw = await self.http.get(
                f"{self.base_url}{LAYOUT_ENDPOINT}",
                {"key": self.api_key, "event": str(event_id)},
            )
            return TournamentLayout.model_validate(_result(raw))

        return await self._call(lambda: validate_event_id(event_id), fetch)

    async def get_predictions(self, params: UserAuthParams) -> UserPredictions:
        async def fetch():
            raw = await self.http.get(f"{self.base_url}{PREDICTIONS_ENDPOINT}", self._auth_params(params))
            return UserPredictions.model_validate(_normalize_predictions(_result(raw)))

        return await self._call(lambda: validate_user_auth_params(params), fetch)

    async def upload_prediction(self, params: UploadPredictionParams) -> UploadResult:
        body = {
            **self._auth_params(params),
            "sectionid": str(params.section_id),
            "groupid": str(params.group_id),
            "index": str(params.index),
            "pickid": str(params.pick_id),
            "itemid": params.item_id,
        }

        async def send():
            raw = await self.http.post(f"{self.base_url}{UPLOAD_PREDICTIONS_ENDPOINT}", body)
            return UploadResult.model_validate(_result(raw))

        return await self._call(lambda: validate_upload_prediction_params(params), send)

    async def upload_multiple_predictions(self, params: UploadMultipleParams) -> UploadResult:
        """Upload several picks in one request using numbered form keys."""
        async def send():
            body = self._auth_params(params)
            for idx, pred in enumerate(params.predictions):
                body[f"sectionid{idx}"] = str(pred.section_id)
                body[f"groupid{idx}"] = str(pred.group_id)
                body[f"index{idx}"] = str(pred.index)
                body[f"pickid{idx}"] = str(pred.pick_id)
                body[f"itemid{idx}"] = pred.item_id
            raw = await self.http.post(f"{self.base_url}{UPLOAD_PREDICTIONS_ENDPOINT}", body)
            return UploadResult.model_validate(_result(raw))

        return await self._call(lambda: validate_upload_multiple_params(params), send)

    # -------------------------------------------------------------------------
    # Items & inventory
    # -------------------------------------------------------------------------

    async def get_tournament_items(self, params: UserAuthParams) -> TournamentItems:
        async def fetch():
            raw = await self.http.get(f"{self.base_url}{ITEMS_ENDPOINT}", self._auth_params(params))
            result = _result(raw)
            return TournamentItems.model_validate({"items": result.get("items") or []})

        return await self._call(lambda: validate_user_auth_params(params), fetch)

    async def get_inventory(self, steam_id: str) -> SteamInventory:
        """
        Fetch the user's CS2 inventory.

        Private or missing inventories answer with an HTTP error; those are
        treated as an empty inventory rather than a failure.
        """
        url = f"{self.inventory_url}/{steam_id}/{CS2_APP_ID}/{INVENTORY_CONTEXT_ID}"

        async def fetch():
            try:
                raw = await self.http.get(url, {"l": "english", "count": "500"})
            except ApiError as e:
                logger.log_warning("inventory_unavailable", status_code=e.status_code)
                return SteamInventory.empty()
            return SteamInventory.model_validate(raw if isinstance(raw, dict) else {})

        return await self._call(lambda: validate_steam_id(steam_id), fetch)

    # -------------------------------------------------------------------------
    # Fantasy
    # -------------------------------------------------------------------------

    async def get_fantasy_lineup(self, params: UserAuthParams) -> FantasyLineup:
        async def fetch():
            raw = await self.http.get(f"{self.base_url}{FANTASY_ENDPOINT}", self._auth_params(params))
            result = _result(raw)
            return FantasyLineup.model_validate({"teams": result.get("teams") or []})

        return await self._call(lambda: validate_user_auth_params(params), fetch)

    async def upload_fantasy_lineup(self, params: UploadLineupParams) -> UploadResult:
        async def send():
            body = {**self._auth_params(params), "sectionid": str(params.section_id)}
            for idx, player in enumerate(params.lineup):
                body[f"pickid{idx}"] = str(player.pick_id)
                body[f"itemid{idx}"] = player.item_id
            raw = await self.http.post(f"{self.base_url}{UPLOAD_FANTASY_ENDPOINT}", body)
            return UploadResult.model_validate(_result(raw))

        return await self._call(lambda: validate_upload_lineup_params(params), send)


def create_client(config: Optional[Settings] = None, http: Optional[AsyncHttpClient] = None) -> PickEmClient:
    """Build a client from configuration (environment / .env by default)."""
    config = config or default_settings
    return PickEmClient(
        api_key=config.api.api_key,
        base_url=config.api.base_url,
        inventory_url=config.api.inventory_url,
        http=http or AsyncHttpClient(timeout=config.api.timeout_s),
        retry_policy=RetryPolicy(
            max_retries=config.retry.max_retries,
            initial_delay=config.retry.initial_delay_s,
        ),
    )


@dataclass(frozen=True)
class BracketView:
    """Everything the ``view`` and ``score`` commands display."""
    layout: TournamentLayout
    predictions: UserPredictions
    score: BracketScore


async def load_bracket(
    client: PickEmClient,
    params: UserAuthParams,
    team_names: Optional[Mapping[int, str]] = None,
) -> BracketView:
    """
    Fetch layout, predictions, items and inventory, then reconcile and score.

    Item and inventory failures only cost team names, so they fall back to
    empty sets; layout and prediction failures propagate.
    """
    layout, predictions = await asyncio.gather(
        client.get_tournament_layout(params.event_id),
        client.get_predictions(params),
    )

    try:
        items = await client.get_tournament_items(params)
    except PickEmError as e:
        logger.log_warning("tournament_items_unavailable", error=e.message)
        items = TournamentItems()

    try:
        inventory = await client.get_inventory(params.steam_id)
    except PickEmError as e:
        logger.log_warning("inventory_unavailable", error=e.message)
        inventory = SteamInventory.empty()

    enriched = enrich_layout(layout, items, inventory, team_names)
    score = calculate_bracket_score(enriched, predictions)
    logger.log_event(
        "bracket_loaded",
        event_id=params.event_id,
        total_points=score.total_points,
        possible_points=score.possible_points,
    )
    return BracketView(layout=enriched, predictions=predictions, score=score)
