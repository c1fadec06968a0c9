"""Live playback state of one guided session."""

from __future__ import annotations

from dataclasses import dataclass

from session_engine.models.enums import PHASE_SECTIONS, REST_PHASE_SET, Phase, Section


@dataclass(frozen=True)
class Session:
    """Snapshot of the session state machine.

    Never mutated in place: the transition table and the controller build
    a new instance with ``dataclasses.replace`` and swap it in.

    ``phase_index`` indexes the exercises of the current section (for the
    main section, of ``main[circuit_index]``). ``circuit_index`` and
    ``circuit_repetition`` are only meaningful in MAIN_* / CIRCUIT_REST.
    """

    phase: Phase
    phase_index: int = 0
    circuit_index: int = 0
    circuit_repetition: int = 1
    timer_seconds: int = 0
    total_duration_seconds: int = 0
    is_paused: bool = False
    elapsed_seconds: int = 0

    @property
    def is_finished(self) -> bool:
        return self.phase == Phase.FINISHED

    @property
    def is_rest(self) -> bool:
        return self.phase in REST_PHASE_SET

    @property
    def section(self) -> Section | None:
        """Section of the current phase, or None once finished."""
        return PHASE_SECTIONS.get(self.phase)

    @property
    def awaits_manual_advance(self) -> bool:
        """True for rep-based steps: no countdown, only skip() moves on."""
        return not self.is_finished and self.total_duration_seconds == 0
