"""Helpers shared by background tasks."""

from labinventory.tasks.utils.task_db import task_db_session

__all__ = ["task_db_session"]
