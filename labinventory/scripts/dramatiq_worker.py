#!/usr/bin/env python
"""Dramatiq worker entry point for the reservation purge queue."""

import os
import shutil
import sys

import click
import structlog

from labinventory.logging import setup_logging

setup_logging()
logger = structlog.get_logger(__name__)

TASKS_MODULE = "labinventory.tasks"


@click.command(context_settings={"ignore_unknown_options": True})
@click.option("--processes", "-p", type=int, default=1, show_default=True, help="Worker processes.")
@click.option("--threads", "-t", type=int, default=2, show_default=True, help="Threads per process.")
@click.argument("dramatiq_args", nargs=-1, type=click.UNPROCESSED)
def main(processes: int, threads: int, dramatiq_args: tuple[str, ...]) -> None:
    """Start Dramatiq workers; extra arguments are passed to the dramatiq CLI.

    Each worker boot queues a purge of expired serial reservations.
    """
    dramatiq_path = shutil.which("dramatiq")
    if dramatiq_path is None:
        logger.error("Dramatiq executable not found in PATH")
        sys.exit(1)

    argv = [dramatiq_path, TASKS_MODULE, "--processes", str(processes), "--threads", str(threads), *dramatiq_args]
    logger.info("Starting Dramatiq workers", processes=processes, threads=threads)
    os.execv(dramatiq_path, argv)


if __name__ == "__main__":
    main()
