# barber_booking/routers/settings_routes.py

import logging

from fastapi import APIRouter, Depends

from barber_booking.auth import get_current_admin
from barber_booking.deps import get_store
from barber_booking.errors import ScheduleValidationError
from barber_booking.models import AdminUser
from barber_booking.schedule import validate_settings_update
from barber_booking.schemas import ShopSettingsPublic, ShopSettingsUpdate
from barber_booking.store import AppointmentStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/settings",
    tags=["settings"],
)


@router.get("", response_model=ShopSettingsPublic)
def get_settings(store: AppointmentStore = Depends(get_store)):
    return store.get_settings()


@router.patch("", response_model=ShopSettingsPublic)
def update_settings(
    update: ShopSettingsUpdate,
    store: AppointmentStore = Depends(get_store),
    current_admin: AdminUser = Depends(get_current_admin),
):
    current = store.get_settings()

    errors = validate_settings_update(update, current)
    if errors:
        logger.info("Rejected settings update from %s: %s", current_admin.email, [e.field for e in errors])
        raise ScheduleValidationError(errors)

    fields = update.model_dump(exclude_unset=True)
    if "working_days" in fields:
        fields["working_days"] = sorted(fields["working_days"])
    if "shop_name" in fields:
        fields["shop_name"] = fields["shop_name"].strip()

    settings = store.update_settings(fields)
    logger.info("Shop settings updated by %s: %s", current_admin.email, sorted(fields))
    return settings
