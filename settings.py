# settings.py
# Environment driven settings for the Streamlit app. The core modules never read these.
from __future__ import annotations

import logging
import os
from pathlib import Path


def pick_data_dir() -> Path:
    """First writable directory among $DATA_DIR, /data and ./data; cwd otherwise."""
    candidates = []
    env = os.getenv("DATA_DIR")
    if env:
        candidates.append(Path(env))
    candidates += [Path("/data"), Path.cwd() / "data"]

    for p in candidates:
        try:
            p.mkdir(parents=True, exist_ok=True)
            t = p / ".rwtest"
            t.write_text("ok")
            t.unlink(missing_ok=True)
            return p
        except OSError:
            continue
    return Path.cwd()


def database_url(data_dir: Path | None = None) -> str:
    data_dir = data_dir or pick_data_dir()
    default_sqlite = f"sqlite:///{(data_dir / 'workhours.db').as_posix()}"
    return os.getenv("DATABASE_URL", default_sqlite)


def configure_logging(level: str | None = None) -> None:
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
