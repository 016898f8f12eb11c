# lanecal/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .model import TODO
from .util.dates import SUNDAY, WEEK_STARTS
from .util.tz import normalize_tz_name

DEFAULT_OUT = os.path.join("build", "lanecal_month.html")


def default_store_path() -> Path:
    return Path.home() / ".lanecal" / "tasks.json"


def parse_week_start(value: Optional[str]) -> int:
    key = (value or "sunday").strip().lower()
    if key not in WEEK_STARTS:
        raise ValueError(f"week start must be one of: {', '.join(sorted(WEEK_STARTS))}")
    return WEEK_STARTS[key]


@dataclass(frozen=True)
class PlannerConfig:
    store_path: Path
    tz: str = "local"
    week_start: int = SUNDAY
    default_category: str = TODO
    out_path: str = DEFAULT_OUT
    log_level: int = logging.WARNING


def load_config(env: Optional[Mapping[str, str]] = None) -> PlannerConfig:
    """Settings from LANECAL_* environment variables; CLI flags override these."""
    env = os.environ if env is None else env

    store = env.get("LANECAL_STORE")
    level_name = (env.get("LANECAL_LOG_LEVEL") or "WARNING").strip().upper()
    level = logging.getLevelName(level_name)

    return PlannerConfig(
        store_path=Path(store).expanduser() if store else default_store_path(),
        tz=normalize_tz_name(env.get("LANECAL_TZ")),
        week_start=parse_week_start(env.get("LANECAL_WEEK_START")),
        out_path=env.get("LANECAL_OUT") or DEFAULT_OUT,
        log_level=level if isinstance(level, int) else logging.WARNING,
    )


def setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
