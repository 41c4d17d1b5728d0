"""
pickem: CS2 Pick'em client with bracket scoring and team name reconciliation.
"""
from pickem.bracket import (
    BracketScore,
    CoinTier,
    SectionScore,
    TierProgress,
    TierThresholds,
    calculate_bracket_score,
    get_accuracy_percentage,
    get_coin_tier,
    get_points_to_next_tier,
)
from pickem.client import BracketView, PickEmClient, create_client, load_bracket
from pickem.errors import ErrorKind, convert_error, map_http_error
from pickem.exceptions import (
    PickEmConflictError,
    PickEmError,
    PickEmGoneError,
    PickEmPreconditionError,
    PickEmRateLimitError,
    PickEmValidationError,
)
from pickem.http.rate_limiter import RetryPolicy, delay, with_retry
from pickem.models import (
    FantasyLineup,
    FantasyTeam,
    LineupEntry,
    MatchGroup,
    Pick,
    Prediction,
    PredictionUpload,
    SteamInventory,
    Team,
    TournamentItem,
    TournamentItems,
    TournamentLayout,
    TournamentSection,
    UploadLineupParams,
    UploadMultipleParams,
    UploadPredictionParams,
    UploadResult,
    UserAuthParams,
    UserPredictions,
)
from pickem.reconcile import enrich_layout
from pickem.validation import (
    validate_auth_code,
    validate_event_id,
    validate_steam_id,
    validate_upload_lineup_params,
    validate_upload_multiple_params,
    validate_upload_prediction_params,
    validate_user_auth_params,
)

__version__ = "0.1.0"

__all__ = [
    "BracketScore",
    "BracketView",
    "CoinTier",
    "ErrorKind",
    "FantasyLineup",
    "FantasyTeam",
    "LineupEntry",
    "MatchGroup",
    "Pick",
    "PickEmClient",
    "PickEmConflictError",
    "PickEmError",
    "PickEmGoneError",
    "PickEmPreconditionError",
    "PickEmRateLimitError",
    "PickEmValidationError",
    "Prediction",
    "PredictionUpload",
    "RetryPolicy",
    "SectionScore",
    "SteamInventory",
    "Team",
    "TierProgress",
    "TierThresholds",
    "TournamentItem",
    "TournamentItems",
    "TournamentLayout",
    "TournamentSection",
    "UploadLineupParams",
    "UploadMultipleParams",
    "UploadPredictionParams",
    "UploadResult",
    "UserAuthParams",
    "UserPredictions",
    "calculate_bracket_score",
    "convert_error",
    "create_client",
    "delay",
    "enrich_layout",
    "get_accuracy_percentage",
    "get_coin_tier",
    "get_points_to_next_tier",
    "load_bracket",
    "map_http_error",
    "validate_auth_code",
    "validate_event_id",
    "validate_steam_id",
    "validate_upload_lineup_params",
    "validate_upload_multiple_params",
    "validate_upload_prediction_params",
    "validate_user_auth_params",
    "with_retry",
]
