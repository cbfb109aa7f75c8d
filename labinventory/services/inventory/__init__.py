"""Inventory services (assets, consumables, locations)."""
