#!/usr/bin/env python3
"""
Vigia - Entry Point
===================

Runs the moderation API with uvicorn.

Loads .env first, so every setting read at import time (log directory,
data directory, auth policy) sees it, then takes an exclusive lock on
the data directory: the SQLite store allows one writing process.
"""

import fcntl
import os
import sys
from typing import IO, Optional

from dotenv import load_dotenv


LOCK_FILENAME = "vigia.pid"


def acquire_instance_lock(data_dir: str) -> Optional[IO[str]]:
    """
    Lock <data_dir>/vigia.pid for this process.

    Returns:
        The open lock file (keep a reference for the process lifetime),
        or None if another instance holds the lock.
    """
    from vigia.core.logger import logger

    os.makedirs(data_dir, exist_ok=True)
    lock_path = os.path.join(data_dir, LOCK_FILENAME)
    fp = open(lock_path, "a+")
    try:
        fcntl.flock(fp.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError:
        fp.seek(0)
        holder = fp.read().strip() or "unknown"
        fp.close()
        logger.error("Another Vigia Instance Is Running", [
            ("Lock File", lock_path),
            ("Holder PID", holder),
        ])
        return None

    fp.seek(0)
    fp.truncate()
    fp.write(str(os.getpid()))
    fp.flush()
    logger.info("Instance Lock Acquired", [
        ("PID", str(os.getpid())),
        ("Lock File", lock_path),
    ])
    return fp


def main() -> None:
    """Load configuration, lock the data directory and serve the API."""
    load_dotenv()

    import uvicorn

    from vigia import __version__
    from vigia.core.config import get_config
    from vigia.core.logger import logger
    from vigia.api.config import get_api_config

    config = get_config()
    api_config = get_api_config()

    lock = acquire_instance_lock(str(config.data_dir))
    if lock is None:
        logger.error("Startup Aborted", [("Reason", "instance lock held")])
        sys.exit(1)

    logger.tree("VIGIA STARTING", [
        ("Version", __version__),
        ("Address", f"http://{api_config.host}:{api_config.port}"),
        ("Database", str(config.db_path)),
        ("Exports", str(config.exports_dir)),
    ], emoji="🔥")

    from vigia.api.app import app

    try:
        uvicorn.run(
            app,
            host=api_config.host,
            port=api_config.port,
            log_level="debug" if api_config.debug else "warning",
        )
    finally:
        from vigia.core.database import DatabaseManager
        DatabaseManager.reset()
        lock.close()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("Vigia stopped by user (Ctrl+C)")
