"""Environment-variable-based configuration for the terminal player."""

from __future__ import annotations

import os
from pathlib import Path

PLAN_PATH: Path = Path(
    os.environ.get("WORKOUT_PLAN_PATH", "streamlit_app/plans/sample_plan.json")
)
TICK_SECONDS: float = float(os.environ.get("WORKOUT_TICK_SECONDS", "1.0"))
CUE_SECONDS: int = int(os.environ.get("WORKOUT_CUE_SECONDS", "3"))
LOG_LEVEL: str = os.environ.get("WORKOUT_LOG_LEVEL", "INFO").upper()
