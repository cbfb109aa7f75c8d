"""API schemas for inventory endpoints.

JSON keys are camelCase on the wire; requests also accept snake_case.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from labinventory.models.alert import Alert
from labinventory.models.enums import AlertType, AssetStatus, TargetType, UserRole
from labinventory.models.inventory import Asset, Consumable, Location
from labinventory.models.serial import SerialReservation
from labinventory.models.user import User
from labinventory.services.reports.report_service import InventoryStats, StaleFilter, StaleItem
from labinventory.utils.datetime_utils import to_api_timezone


def _serialize_datetime(dt: datetime) -> str:
    """Serialize datetime to API timezone."""
    localized_dt = to_api_timezone(dt)
    assert localized_dt is not None
    return localized_dt.isoformat()


ApiDatetime = Annotated[datetime, PlainSerializer(_serialize_datetime, return_type=str)]


class ApiModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Request Schemas
# =============================================================================


class AssetCreateRequest(ApiModel):
    serial: str = Field(min_length=3)
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    location_id: str = Field(min_length=1)
    budget_code: str | None = None
    purchased_at: date | None = None
    note: str | None = None


class AssetUpdateRequest(ApiModel):
    """Partial update; only fields present in the body are applied."""

    name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    location_id: str | None = Field(default=None, min_length=1)
    budget_code: str | None = None
    purchased_at: date | None = None
    note: str | None = None

    def to_changes(self) -> dict[str, object]:
        """Map set fields to Asset attribute names, dropping nulls for required columns."""
        changes = self.model_dump(exclude_unset=True)
        for required in ("name", "category", "location_id"):
            if changes.get(required) is None:
                changes.pop(required, None)
        if "location_id" in changes:
            changes["current_location_id"] = changes.pop("location_id")
        return changes


class CheckoutRequest(ApiModel):
    user_id: str = Field(min_length=1)
    location_id: str = Field(min_length=1)
    note: str | None = None


class LocationChangeRequest(ApiModel):
    """Body for check-in and move."""

    location_id: str = Field(min_length=1)
    note: str | None = None


class ConsumableCreateRequest(ApiModel):
    serial: str = Field(min_length=3)
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    current_qty: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    reorder_threshold: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    location_id: str = Field(min_length=1)
    note: str | None = None


class QuantityAdjustRequest(ApiModel):
    delta: Decimal = Field(max_digits=12, decimal_places=2)
    note: str | None = None


class UserCreateRequest(ApiModel):
    name: str = Field(min_length=1)
    role: UserRole = UserRole.MEMBER


# =============================================================================
# Response Schemas
# =============================================================================


class SerialReservationResponse(ApiModel):
    """Reserved serial and the moment the reservation lapses."""

    serial: str
    expires_at: ApiDatetime

    @classmethod
    def from_model(cls, reservation: SerialReservation) -> "SerialReservationResponse":
        return cls(serial=reservation.serial, expires_at=reservation.expires_at)


class LocationSummary(ApiModel):
    id: str
    name: str

    @classmethod
    def from_model(cls, location: Location | None) -> "LocationSummary | None":
        if location is None:
            return None
        return cls(id=location.id, name=location.name)


class UserSummary(ApiModel):
    id: str
    name: str


class UserResponse(ApiModel):
    id: str
    name: str
    role: UserRole
    created_at: ApiDatetime

    @classmethod
    def from_model(cls, user: User) -> "UserResponse":
        return cls(id=user.id, name=user.name, role=user.role, created_at=user.created_at)


class AssetResponse(ApiModel):
    id: str
    serial: str
    name: str
    category: str
    status: AssetStatus
    budget_code: str | None
    purchased_at: date | None
    note: str | None
    current_location_id: str
    current_user_id: str | None
    current_location: LocationSummary | None
    current_user: UserSummary | None
    last_activity_at: ApiDatetime
    created_at: ApiDatetime
    updated_at: ApiDatetime

    @classmethod
    def from_model(cls, asset: Asset) -> "AssetResponse":
        """Create response from Asset model (relationships must be loaded)."""
        user = asset.current_user
        return cls(
            id=asset.id,
            serial=asset.serial,
            name=asset.name,
            category=asset.category,
            status=asset.status,
            budget_code=asset.budget_code,
            purchased_at=asset.purchased_at,
            note=asset.note,
            current_location_id=asset.current_location_id,
            current_user_id=asset.current_user_id,
            current_location=LocationSummary.from_model(asset.current_location),
            current_user=UserSummary(id=user.id, name=user.name) if user else None,
            last_activity_at=asset.last_activity_at,
            created_at=asset.created_at,
            updated_at=asset.updated_at,
        )


class UserAssetsResponse(ApiModel):
    user: UserResponse
    count: int
    assets: list[AssetResponse]


class ConsumableResponse(ApiModel):
    id: str
    serial: str
    name: str
    category: str
    unit: str
    current_qty: float
    reorder_threshold: float
    needs_reorder: bool
    location_id: str
    location: LocationSummary | None
    note: str | None
    last_activity_at: ApiDatetime
    created_at: ApiDatetime
    updated_at: ApiDatetime

    @classmethod
    def from_model(cls, consumable: Consumable) -> "ConsumableResponse":
        """Create response from Consumable model (location must be loaded)."""
        return cls(
            id=consumable.id,
            serial=consumable.serial,
            name=consumable.name,
            category=consumable.category,
            unit=consumable.unit,
            current_qty=float(consumable.current_qty),
            reorder_threshold=float(consumable.reorder_threshold),
            needs_reorder=consumable.needs_reorder,
            location_id=consumable.location_id,
            location=LocationSummary.from_model(consumable.location),
            note=consumable.note,
            last_activity_at=consumable.last_activity_at,
            created_at=consumable.created_at,
            updated_at=consumable.updated_at,
        )


class StatsResponse(ApiModel):
    checked_out_count: int
    stale_days: int
    stale_count: int
    stale_asset_count: int
    stale_consumable_count: int

    @classmethod
    def from_stats(cls, stats: InventoryStats) -> "StatsResponse":
        return cls(
            checked_out_count=stats.checked_out_count,
            stale_days=stats.stale_days,
            stale_count=stats.stale_count,
            stale_asset_count=stats.stale_asset_count,
            stale_consumable_count=stats.stale_consumable_count,
        )


class StaleItemResponse(ApiModel):
    type: TargetType
    id: str
    serial: str
    name: str
    category: str
    location: str | None
    last_activity_at: ApiDatetime
    days_since: int
    status: AssetStatus | None = None
    user: UserSummary | None = None
    unit: str | None = None
    current_qty: float | None = None
    reorder_threshold: float | None = None

    @classmethod
    def from_item(cls, item: StaleItem) -> "StaleItemResponse":
        return cls(
            type=item.type,
            id=item.id,
            serial=item.serial,
            name=item.name,
            category=item.category,
            location=item.location,
            last_activity_at=item.last_activity_at,
            days_since=item.days_since,
            status=item.status,
            user=UserSummary(id=item.user_id, name=item.user_name or "") if item.user_id else None,
            unit=item.unit,
            current_qty=float(item.current_qty) if item.current_qty is not None else None,
            reorder_threshold=float(item.reorder_threshold) if item.reorder_threshold is not None else None,
        )


class StaleMeta(ApiModel):
    days: int
    type: StaleFilter
    limit: int
    offset: int
    returned: int
    total_approx: int


class StaleListResponse(ApiModel):
    meta: StaleMeta
    items: list[StaleItemResponse]


class AlertResponse(ApiModel):
    id: str
    type: AlertType
    target_type: TargetType
    target_id: str
    title: str
    body: str
    is_read: bool
    snooze_until: ApiDatetime | None
    created_at: ApiDatetime
    updated_at: ApiDatetime

    @classmethod
    def from_model(cls, alert: Alert) -> "AlertResponse":
        return cls(
            id=alert.id,
            type=alert.type,
            target_type=alert.target_type,
            target_id=alert.target_id,
            title=alert.title,
            body=alert.body,
            is_read=alert.is_read,
            snooze_until=alert.snooze_until,
            created_at=alert.created_at,
            updated_at=alert.updated_at,
        )


class AlertRebuildResponse(ApiModel):
    days: int
    created_or_updated: int


class UnreadCountResponse(ApiModel):
    count: int
