"""
Analysis orchestration.

Dispatches the primary structured analysis, the screening calls, derived
free-text analyses and chat turns to the model service. The orchestrator
holds no per-session state and is safe to share across concurrent sessions.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from eintsofia.domain.models.analysis_result import (
    AnalysisResult,
    StructuredReport,
    Transcription,
)
from eintsofia.domain.models.interaction import (
    ChatReply,
    ChatTurn,
    DerivedAnalysisKind,
    DerivedAnalysisOptions,
    MediaAsset,
    Participant,
)
from eintsofia.domain.models.prompt_config import Persona
from eintsofia.domain.models.screening import (
    UNKNOWN_PARTICIPANT_NAME,
    Anomaly,
    AnomalyFinding,
    EmotionPoint,
    EmotionReading,
    IdentifiedPerson,
    ParticipantIdentification,
    QuickAnalysis,
    QuickAnalysisResult,
    SafetyScan,
    SafetyScanResult,
    timestamp_to_seconds,
)
from eintsofia.infrastructure.constants.llm_constants import (
    ANOMALY_EMOTION_THRESHOLD,
    GEMINI_SAFETY_SETTINGS_BLOCK_NONE,
)
from eintsofia.services.conversation import ConversationContextManager
from eintsofia.services.llm.base import ModelResponse, ModelService
from eintsofia.services.llm.exceptions import (
    AnalysisFailedError,
    InvalidAnalysisOptionsError,
    InvalidAnalysisTypeError,
    SchemaViolationError,
)
from eintsofia.services.llm.prompts.chat import EmmaChatPrompts
from eintsofia.services.llm.prompts.derived_analysis import DerivedAnalysisPrompts
from eintsofia.services.llm.prompts.screening import ScreeningPrompts
from eintsofia.services.llm.prompts.transcription import TranscriptionPrompts
from eintsofia.services.llm.schema_contract import (
    build_array_schema,
    build_request_schema,
    parse_result,
    parse_structured,
    parse_structured_list,
)
from eintsofia.services.prompt_config_service import PersonaConfigurationStore

logger = logging.getLogger(__name__)

PriorResult = Union[AnalysisResult, Dict[str, Any]]


class AnalysisOrchestrator:
    """
    Builds and dispatches every model call of an analysis session.

    Primary, screening and derived analyses make exactly one model call and
    never retry; service failures surface as ``AnalysisFailedError``. Chat
    turns never raise and degrade to a fixed apology instead.
    """

    def __init__(
        self,
        model_service: ModelService,
        prompt_store: PersonaConfigurationStore,
        context_manager: Optional[ConversationContextManager] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.model_service = model_service
        self.prompt_store = prompt_store
        self.context_manager = context_manager or ConversationContextManager()
        self.clock = clock
        self.report_schema = build_request_schema(StructuredReport)
        self.transcription_schema = build_request_schema(Transcription)
        self.identification_schema = build_array_schema(IdentifiedPerson)
        self.quick_analysis_schema = build_request_schema(QuickAnalysis)
        self.safety_scan_schema = build_request_schema(SafetyScan)
        self.timeline_schema = build_array_schema(EmotionReading)
        self.anomaly_schema = build_array_schema(AnomalyFinding)

    async def run_primary_analysis(
        self,
        asset: MediaAsset,
        persona: Union[Persona, str],
        participants: Optional[List[Participant]] = None,
    ) -> AnalysisResult:
        """
        Run the structured analysis of ``asset`` for ``persona``.

        Raises:
            AnalysisFailedError: the model service call failed
            MalformedResponseError: the reply is not JSON
            SchemaViolationError: the reply lacks required sections
        """
        persona = Persona(persona)
        config = self.prompt_store.load(persona)
        prompt = self.prompt_store.render_prompt(config, participants)

        logger.info(
            f"Starting primary analysis: persona={persona.value}, prompt v{config.version}, "
            f"media={asset.mime_type} {asset.size_mb}MB"
        )
        started = self.clock()
        response = await self._dispatch(
            "primary analysis",
            self.model_service.generate_structured(prompt, asset, self.report_schema),
        )
        result = parse_result(response.text)
        duration = max(0.0, self.clock() - started)

        logger.info(f"Primary analysis completed in {duration:.2f}s")
        return result.model_copy(
            update={"duration": duration, "usage_metadata": response.usage}
        )

    def build_derived_prompt(
        self,
        kind: Union[DerivedAnalysisKind, str],
        prior_result: PriorResult,
        options: Optional[Union[DerivedAnalysisOptions, Dict[str, Any]]] = None,
    ) -> str:
        """
        Build the free-text prompt for a derived analysis without calling the model.

        Raises:
            InvalidAnalysisTypeError: ``kind`` is not a known derived analysis
            InvalidAnalysisOptionsError: options required by ``kind`` are missing
        """
        try:
            kind = DerivedAnalysisKind(kind)
        except ValueError:
            raise InvalidAnalysisTypeError(kind) from None

        options = self._coerce_options(options)
        snapshot = (
            prior_result.snapshot()
            if isinstance(prior_result, AnalysisResult)
            else dict(prior_result or {})
        )
        prompt = DerivedAnalysisPrompts.context_block(
            snapshot, options.participants, options.persona
        )

        if kind == DerivedAnalysisKind.PARTICIPANT_ANALYSIS:
            prompt += DerivedAnalysisPrompts.participant_analysis(options.depth)
        elif kind == DerivedAnalysisKind.INTERVENTION_PLAN:
            if options.method is None or options.focus is None:
                raise InvalidAnalysisOptionsError(
                    "intervention_plan requires both 'method' and 'focus'"
                )
            prompt += DerivedAnalysisPrompts.intervention_plan(options.method, options.focus)
        elif kind == DerivedAnalysisKind.CUSTOM_PLAN:
            if not options.custom_instructions or not options.custom_instructions.strip():
                raise InvalidAnalysisOptionsError("custom_plan requires 'customInstructions'")
            prompt += DerivedAnalysisPrompts.custom_plan(options.custom_instructions)

        return prompt

    async def run_derived_analysis(
        self,
        kind: Union[DerivedAnalysisKind, str],
        prior_result: PriorResult,
        options: Optional[Union[DerivedAnalysisOptions, Dict[str, Any]]] = None,
    ) -> str:
        """
        Run a follow-up analysis grounded on ``prior_result``; returns Markdown text.

        Invalid kinds and options are rejected before any model call.
        """
        prompt = self.build_derived_prompt(kind, prior_result, options)
        logger.info(f"Starting derived analysis: {kind}")
        response = await self._dispatch(
            f"derived analysis ({kind})",
            self.model_service.generate_text(
                prompt, safety_settings=GEMINI_SAFETY_SETTINGS_BLOCK_NONE
            ),
        )
        return response.text

    async def run_chat_turn(
        self,
        history: List[ChatTurn],
        message: str,
        anchor_result: Optional[PriorResult],
        persona: Optional[Union[Persona, str]] = None,
    ) -> ChatReply:
        """
        Send one chat message anchored on the current report.

        Never raises: any failure yields a degraded reply carrying the apology text.
        """
        try:
            persona = Persona(persona) if persona is not None else None
            context = self.context_manager.build_context(history, anchor_result, persona)
            response = await self.model_service.send_chat_message(context, message)
            if not response.text or not response.text.strip():
                raise ValueError("empty chat reply")
            return ChatReply(text=response.text)
        except Exception as e:
            logger.warning(f"Chat turn failed, replying with apology: {e}", exc_info=True)
            return ChatReply(text=EmmaChatPrompts.APOLOGY, degraded=True, error=str(e))

    async def transcribe(self, audio: MediaAsset) -> Transcription:
        """Transcribe a voice note and profile its speaker."""
        logger.info(f"Starting transcription: {audio.mime_type} {audio.size_mb}MB")
        response = await self._dispatch(
            "transcription",
            self.model_service.transcribe(
                TranscriptionPrompts.get_prompt(), audio, self.transcription_schema
            ),
        )
        return parse_structured(response.text, Transcription)

    async def identify_participants(self, asset: MediaAsset) -> ParticipantIdentification:
        """
        Count and label the people in ``asset``.

        Participants are named by position (``משתתף 1``, ...); see
        ``IdentifiedPerson.display_age`` for which ages are kept.
        """
        logger.info(f"Starting participant identification: {asset.mime_type} {asset.size_mb}MB")
        started = self.clock()
        response = await self._dispatch(
            "participant identification",
            self.model_service.generate_structured(
                ScreeningPrompts.identify_participants(), asset, self.identification_schema
            ),
        )
        people = parse_structured_list(response.text, IdentifiedPerson)
        participants = [person.to_participant(i) for i, person in enumerate(people)]
        duration = max(0.0, self.clock() - started)

        logger.info(f"Identified {len(participants)} participants in {duration:.2f}s")
        return ParticipantIdentification(
            participants=participants, duration=duration, usage_metadata=response.usage
        )

    async def quick_analysis(
        self, asset: MediaAsset, participants: Optional[List[Participant]] = None
    ) -> QuickAnalysisResult:
        """Short description of the clip plus the single most urgent recommendation."""
        logger.info(f"Starting quick analysis with {len(participants or [])} participants")
        started = self.clock()
        response = await self._dispatch(
            "quick analysis",
            self.model_service.generate_structured(
                ScreeningPrompts.quick_analysis(participants), asset, self.quick_analysis_schema
            ),
        )
        quick = parse_structured(response.text, QuickAnalysis)
        duration = max(0.0, self.clock() - started)

        logger.info(f"Quick analysis completed in {duration:.2f}s")
        return QuickAnalysisResult(
            **quick.model_dump(), duration=duration, usage_metadata=response.usage
        )

    async def quick_safety_scan(self, asset: MediaAsset) -> SafetyScanResult:
        started = self.clock()
        response = await self._dispatch(
            "safety scan",
            self.model_service.generate_structured(
                ScreeningPrompts.safety_scan(), asset, self.safety_scan_schema
            ),
        )
        scan = parse_structured(response.text, SafetyScan)
        duration = max(0.0, self.clock() - started)

        logger.info(f"Safety scan: {scan.verdict.value} ({scan.score}/10) in {duration:.2f}s")
        return SafetyScanResult(
            **scan.model_dump(), duration=duration, usage_metadata=response.usage
        )

    async def summarize_event(
        self, asset: MediaAsset, participants: Optional[List[Participant]] = None
    ) -> str:
        """Two or three plain-text sentences on what happened in the clip."""
        response = await self._dispatch(
            "event summary",
            self.model_service.generate_text(
                ScreeningPrompts.event_summary(participants), media=asset
            ),
        )
        summary = response.text.strip()
        if not summary:
            raise AnalysisFailedError("event summary failed: empty reply")
        return summary

    async def generate_emotion_timeline(
        self,
        asset: MediaAsset,
        participants: List[Participant],
        persona: Union[Persona, str],
    ) -> List[EmotionPoint]:
        """
        Emotion levels (1-5) per participant over time, ordered by timestamp.

        The persona's identity section frames the reading. Points that name an
        unknown participant keep the placeholder name.
        """
        config = self.prompt_store.load(persona)
        prompt = ScreeningPrompts.emotion_timeline(participants, config.sections.identity)
        logger.info(f"Starting emotion timeline for {len(participants)} participants")
        response = await self._dispatch(
            "emotion timeline",
            self.model_service.generate_structured(prompt, asset, self.timeline_schema),
        )
        readings = parse_structured_list(response.text, EmotionReading)
        names = self._names_by_id(participants)
        points = [
            EmotionPoint(
                **reading.model_dump(),
                timestamp_seconds=self._seconds(reading.timestamp),
                participant_name=names.get(reading.participant_id, UNKNOWN_PARTICIPANT_NAME),
            )
            for reading in readings
        ]
        return sorted(points, key=lambda p: p.timestamp_seconds)

    async def analyze_anomalies(
        self,
        asset: MediaAsset,
        timeline: Iterable[EmotionPoint],
        participants: List[Participant],
        persona: Union[Persona, str],
    ) -> List[Anomaly]:
        """
        Analyze the timeline points below ``ANOMALY_EMOTION_THRESHOLD``.

        No model call is made when there are none.
        """
        flagged = [p for p in timeline if p.emotion_level < ANOMALY_EMOTION_THRESHOLD]
        if not flagged:
            logger.info("No anomalies in emotion timeline")
            return []

        config = self.prompt_store.load(persona)
        prompt = ScreeningPrompts.anomalies(
            flagged, config.sections.forensic, config.sections.psychology
        )
        logger.info(f"Analyzing {len(flagged)} anomalies")
        response = await self._dispatch(
            "anomaly analysis",
            self.model_service.generate_structured(prompt, asset, self.anomaly_schema),
        )
        findings = parse_structured_list(response.text, AnomalyFinding)
        names = self._names_by_id(participants)
        return [
            Anomaly(
                **finding.model_dump(),
                timestamp_seconds=self._seconds(finding.timestamp),
                participant_name=names.get(finding.participant_id, UNKNOWN_PARTICIPANT_NAME),
            )
            for finding in findings
        ]

    @staticmethod
    def _names_by_id(participants: Optional[List[Participant]]) -> Dict[str, str]:
        return {p.id: p.name for p in participants or []}

    @staticmethod
    def _seconds(timestamp: str) -> int:
        try:
            return timestamp_to_seconds(timestamp)
        except ValueError:
            raise SchemaViolationError(f"Timestamp is not MM:SS: {timestamp!r}") from None

    @staticmethod
    def _coerce_options(
        options: Optional[Union[DerivedAnalysisOptions, Dict[str, Any]]],
    ) -> DerivedAnalysisOptions:
        if options is None:
            return DerivedAnalysisOptions()
        if isinstance(options, DerivedAnalysisOptions):
            return options
        try:
            return DerivedAnalysisOptions.model_validate(options)
        except ValidationError as e:
            raise InvalidAnalysisOptionsError(f"Invalid analysis options: {e}") from e

    @staticmethod
    async def _dispatch(label: str, call) -> ModelResponse:
        try:
            return await call
        except Exception as e:
            logger.error(f"Model service failed during {label}: {e}", exc_info=True)
            raise AnalysisFailedError(f"{label} failed: {e}", cause=e) from e
