"""
Input validation run before any request is sent.

Every check raises ``pickem.errors.ValidationError`` naming the offending
field. Composite validators run their checks in a fixed order and stop at
the first failure.
"""
import re
from typing import Any, Optional

from pickem.errors import ValidationError
from pickem.models import (
    UploadLineupParams,
    UploadMultipleParams,
    UploadPredictionParams,
    UserAuthParams,
)

STEAM_ID_PATTERN = re.compile(r"[0-9]{17}")
AUTH_CODE_PATTERN = re.compile(r"[A-Z0-9]{4}-[A-Z0-9]{5}-[A-Z0-9]{4}", re.IGNORECASE)

LINEUP_SIZE = 5


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_steam_id(steam_id: str) -> None:
    """SteamID64: exactly 17 ASCII digits."""
    if not isinstance(steam_id, str) or not STEAM_ID_PATTERN.fullmatch(steam_id):
        raise ValidationError("Steam ID must be 17 digits (SteamID64 format)", "steamId")


def validate_auth_code(auth_code: str) -> None:
    if not isinstance(auth_code, str) or not AUTH_CODE_PATTERN.fullmatch(auth_code):
        raise ValidationError("Auth code must be in format XXXX-XXXXX-XXXX", "authCode")


def validate_positive_int(value: Any, field: str, label: Optional[str] = None) -> None:
    """``label`` names the value in the message; defaults to ``field``."""
    if not _is_int(value) or value <= 0:
        raise ValidationError(f"{label or field} must be a positive integer", field)


def validate_event_id(event_id: int) -> None:
    validate_positive_int(event_id, "eventId", "Event ID")


def validate_index(index: int, field: str = "index") -> None:
    """Pick slot index; zero is the first slot."""
    if not _is_int(index) or index < 0:
        raise ValidationError("Index must be a non-negative integer", field)


def validate_item_id(item_id: str, field: str = "itemId", label: str = "Item ID") -> None:
    if not isinstance(item_id, str) or not item_id.strip():
        raise ValidationError(f"{label} is required", field)


def validate_user_auth_params(params: UserAuthParams) -> None:
    validate_event_id(params.event_id)
    validate_steam_id(params.steam_id)
    validate_auth_code(params.auth_code)


def validate_upload_prediction_params(params: UploadPredictionParams) -> None:
    """Checks auth, then section, group, index, pick and item in that order."""
    validate_user_auth_params(params)
    validate_positive_int(params.section_id, "sectionId", "Section ID")
    validate_positive_int(params.group_id, "groupId", "Group ID")
    validate_index(params.index)
    validate_positive_int(params.pick_id, "pickId", "Pick ID")
    validate_item_id(params.item_id)


def validate_upload_multiple_params(params: UploadMultipleParams) -> None:
    validate_user_auth_params(params)

    if not params.predictions:
        raise ValidationError("At least one prediction is required", "predictions")

    for idx, pred in enumerate(params.predictions):
        prefix = f"predictions[{idx}]"
        label = f"Prediction {idx + 1}"
        validate_positive_int(pred.section_id, f"{prefix}.sectionId", f"{label} section ID")
        validate_positive_int(pred.group_id, f"{prefix}.groupId", f"{label} group ID")
        validate_index(pred.index, f"{prefix}.index")
        validate_positive_int(pred.pick_id, f"{prefix}.pickId", f"{label} pick ID")
        validate_item_id(pred.item_id, f"{prefix}.itemId", f"{label} item ID")


def validate_upload_lineup_params(params: UploadLineupParams) -> None:
    """
    Validate a fantasy lineup upload.

    The lineup must hold exactly five players; each player's pick and item
    are checked with the field reported as ``lineup[i].pickId`` /
    ``lineup[i].itemId``.
    """
    validate_user_auth_params(params)
    validate_positive_int(params.section_id, "sectionId", "Section ID")

    if not isinstance(params.lineup, (list, tuple)) or len(params.lineup) != LINEUP_SIZE:
        raise ValidationError(f"Fantasy lineup must have exactly {LINEUP_SIZE} players", "lineup")

    for idx, player in enumerate(params.lineup):
        label = f"Player {idx + 1}"
        validate_positive_int(player.pick_id, f"lineup[{idx}].pickId", f"{label} pick ID")
        validate_item_id(player.item_id, f"lineup[{idx}].itemId", f"{label} item ID")
