"""
Per-session analysis state machine.

Idle -> Uploading -> PrimaryInFlight -> PrimaryComplete | PrimaryFailed.
From PrimaryComplete any number of derived analyses may run, one at a time,
without altering the primary result. A failed session is re-entered via
``reset()``.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from eintsofia.domain.models.analysis_result import AnalysisResult
from eintsofia.domain.models.interaction import (
    DerivedAnalysisKind,
    DerivedAnalysisOptions,
    MediaAsset,
    Participant,
)
from eintsofia.domain.models.prompt_config import Persona
from eintsofia.services.analysis_orchestrator import AnalysisOrchestrator
from eintsofia.services.llm.exceptions import InvalidSessionStateError

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    PRIMARY_IN_FLIGHT = "primary_in_flight"
    PRIMARY_COMPLETE = "primary_complete"
    PRIMARY_FAILED = "primary_failed"
    DERIVED_IN_FLIGHT = "derived_in_flight"
    DERIVED_COMPLETE = "derived_complete"


# States from which a derived analysis may start
_DERIVED_READY = {SessionState.PRIMARY_COMPLETE, SessionState.DERIVED_COMPLETE}


class AnalysisSession:
    """One user's upload and its follow-ups."""

    def __init__(self, orchestrator: AnalysisOrchestrator, persona: Union[Persona, str]):
        self.orchestrator = orchestrator
        self.persona = Persona(persona)
        self.state = SessionState.IDLE
        self.asset: Optional[MediaAsset] = None
        self.primary_result: Optional[AnalysisResult] = None
        self.derived_results: List[Dict[str, Any]] = []
        self.last_error: Optional[Exception] = None

    def _require(self, *allowed: SessionState) -> None:
        if self.state not in allowed:
            raise InvalidSessionStateError(
                f"Cannot do this in state {self.state.value}; "
                f"expected one of {[s.value for s in allowed]}"
            )

    def _transition(self, new_state: SessionState) -> None:
        logger.debug(f"Session {id(self):x}: {self.state.value} -> {new_state.value}")
        self.state = new_state

    def begin_upload(self) -> None:
        self._require(SessionState.IDLE)
        self._transition(SessionState.UPLOADING)

    def attach_asset(self, asset: MediaAsset) -> None:
        self._require(SessionState.UPLOADING)
        self.asset = asset

    async def run_primary(
        self, participants: Optional[List[Participant]] = None
    ) -> AnalysisResult:
        self._require(SessionState.UPLOADING)
        if self.asset is None:
            raise InvalidSessionStateError("No media attached to this session")

        self._transition(SessionState.PRIMARY_IN_FLIGHT)
        try:
            result = await self.orchestrator.run_primary_analysis(
                self.asset, self.persona, participants
            )
        except Exception as e:
            self.last_error = e
            self._transition(SessionState.PRIMARY_FAILED)
            raise

        self.primary_result = result
        self.last_error = None
        self._transition(SessionState.PRIMARY_COMPLETE)
        return result

    async def run_derived(
        self,
        kind: Union[DerivedAnalysisKind, str],
        options: Optional[Union[DerivedAnalysisOptions, Dict[str, Any]]] = None,
    ) -> str:
        self._require(*_DERIVED_READY)
        previous = self.state
        self._transition(SessionState.DERIVED_IN_FLIGHT)
        try:
            text = await self.orchestrator.run_derived_analysis(
                kind, self.primary_result, options
            )
        except Exception:
            # A failed follow-up leaves the primary result usable
            self._transition(previous)
            raise

        self.derived_results.append({"kind": str(getattr(kind, "value", kind)), "text": text})
        self._transition(SessionState.DERIVED_COMPLETE)
        return text

    def reset(self) -> None:
        """Return a failed (or finished) session to Idle."""
        self._require(
            SessionState.PRIMARY_FAILED,
            SessionState.PRIMARY_COMPLETE,
            SessionState.DERIVED_COMPLETE,
        )
        self.asset = None
        self.primary_result = None
        self.derived_results = []
        self.last_error = None
        self._transition(SessionState.IDLE)
