"""Enumerations and playback constants for the session engine."""

from enum import IntEnum, auto


class Section(IntEnum):
    """Major workout sections in play order."""

    WARMUP = auto()
    MAIN = auto()
    CORE = auto()
    COOLDOWN = auto()


class Phase(IntEnum):
    """Discrete states of the guided session.

    Every section has a WORK and a REST phase; the main section also has
    CIRCUIT_REST between repetitions of a circuit.
    """

    WARMUP_WORK = auto()
    WARMUP_REST = auto()
    MAIN_WORK = auto()
    MAIN_REST = auto()
    CIRCUIT_REST = auto()
    CORE_WORK = auto()
    CORE_REST = auto()
    COOLDOWN_WORK = auto()
    COOLDOWN_REST = auto()
    FINISHED = auto()


WORK_PHASES: dict[Section, Phase] = {
    Section.WARMUP: Phase.WARMUP_WORK,
    Section.MAIN: Phase.MAIN_WORK,
    Section.CORE: Phase.CORE_WORK,
    Section.COOLDOWN: Phase.COOLDOWN_WORK,
}

REST_PHASES: dict[Section, Phase] = {
    Section.WARMUP: Phase.WARMUP_REST,
    Section.MAIN: Phase.MAIN_REST,
    Section.CORE: Phase.CORE_REST,
    Section.COOLDOWN: Phase.COOLDOWN_REST,
}

PHASE_SECTIONS: dict[Phase, Section] = {
    **{phase: section for section, phase in WORK_PHASES.items()},
    **{phase: section for section, phase in REST_PHASES.items()},
    Phase.CIRCUIT_REST: Section.MAIN,
}

REST_PHASE_SET = frozenset(REST_PHASES.values()) | {Phase.CIRCUIT_REST}

# ---------------------------------------------------------------------------
# Playback constants
# ---------------------------------------------------------------------------

# Seconds between clock ticks
TICK_INTERVAL_SECONDS = 1.0

# Remaining seconds at or below which on_tick is treated as a countdown cue
LOW_TIME_CUE_SECONDS = 3

# Rest between circuit rounds when the plan only says "Repeat this set N times"
DEFAULT_REST_BETWEEN_ROUNDS_SECONDS = 60

# Perceived exertion scale (1 = easy, 10 = max effort)
MIN_PERCEIVED_EXERTION = 1
MAX_PERCEIVED_EXERTION = 10
