"""Inventory API package.

This package contains the inventory endpoints organized by domain:
- serial_routes: Serial reservation
- asset_routes: Asset registration, search and lifecycle transitions
- consumable_routes: Consumable registration and stock adjustment
- user_routes: Lab members
- report_routes: Dashboard statistics and stale items
- alert_routes: Stale-item alert inbox
"""

from fastapi import APIRouter

from labinventory.api.v1.inventory.alert_routes import router as alert_router
from labinventory.api.v1.inventory.asset_routes import router as asset_router
from labinventory.api.v1.inventory.consumable_routes import router as consumable_router
from labinventory.api.v1.inventory.report_routes import router as report_router
from labinventory.api.v1.inventory.serial_routes import router as serial_router
from labinventory.api.v1.inventory.user_routes import router as user_router

# Create a combined router for all inventory endpoints
router = APIRouter()

router.include_router(serial_router)
router.include_router(asset_router)
router.include_router(consumable_router)
router.include_router(user_router)
router.include_router(report_router)
router.include_router(alert_router)

__all__ = ["router"]
