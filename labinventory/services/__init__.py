"""Services module.

This module provides the service layer architecture:
- exceptions: Custom service exceptions
- serials: Serial reservation and consumption
- inventory: Assets, consumables and locations
- users: Lab members and the SYSTEM actor
- reports: Dashboard statistics and stale items
"""
