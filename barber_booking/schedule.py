# barber_booking/schedule.py

from typing import List, Optional

from .errors import ConfigError
from .models import ShopSettings
from .schemas import ShopSettingsUpdate
from .slots import MINUTES_PER_DAY, overlaps, to_minutes

REQUIRED_FIELDS = (
    "shop_name",
    "slot_duration_minutes",
    "morning_start",
    "morning_end",
    "afternoon_start",
    "afternoon_end",
    "working_days",
)

WINDOWS = (
    ("morning_start", "morning_end"),
    ("afternoon_start", "afternoon_end"),
)


def validate_settings_update(
    update: ShopSettingsUpdate,
    current: Optional[ShopSettings] = None,
) -> List[ConfigError]:
    """Check an admin edit before it is persisted.

    Only fields present in the update are checked on their own; window
    rules are checked against the update merged over ``current`` so that a
    partial edit cannot leave the stored schedule inconsistent. Returns one
    ConfigError per offending field, empty when the edit can be saved.
    """
    changes = update.model_dump(exclude_unset=True)
    errors: List[ConfigError] = []

    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            errors.append(ConfigError(field, f"{field} is required"))

    if changes.get("shop_name") is not None and not changes["shop_name"].strip():
        errors.append(ConfigError("shop_name", "shop_name must not be empty"))

    duration = changes.get("slot_duration_minutes")
    if duration is not None:
        if duration <= 0:
            errors.append(ConfigError("slot_duration_minutes", "slot_duration_minutes must be a positive integer"))
        elif duration >= MINUTES_PER_DAY:
            errors.append(ConfigError("slot_duration_minutes", "slot_duration_minutes must be shorter than a day"))

    working_days = changes.get("working_days")
    if working_days is not None:
        if any(not (0 <= day <= 6) for day in working_days):
            errors.append(ConfigError("working_days", "working_days must be integers between 0 and 6"))
        elif len(working_days) != len(set(working_days)):
            errors.append(ConfigError("working_days", "working_days cannot contain duplicates"))

    merged = {}
    for start_field, end_field in WINDOWS:
        for field in (start_field, end_field):
            value = changes.get(field)
            if value is None and current is not None:
                value = getattr(current, field)
            merged[field] = value

    for start_field, end_field in WINDOWS:
        start, end = merged[start_field], merged[end_field]
        if start is None or end is None:
            continue
        if to_minutes(end) < to_minutes(start):
            errors.append(ConfigError(end_field, f"{end_field} cannot be earlier than {start_field}"))

    # windows may not overlap; a degenerate window has no slots and never overlaps
    if all(merged[f] is not None for f in merged):
        morning = (to_minutes(merged["morning_start"]), to_minutes(merged["morning_end"]))
        afternoon = (to_minutes(merged["afternoon_start"]), to_minutes(merged["afternoon_end"]))
        if morning[0] < morning[1] and afternoon[0] < afternoon[1]:
            if overlaps(*morning, *afternoon):
                errors.append(ConfigError("afternoon_start", "afternoon window overlaps the morning window"))

    return errors
