"""Read-only inventory reports."""
