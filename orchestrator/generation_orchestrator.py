"""Generation Orchestrator - one request from documents to ScheduleResult.

Flow for a single request:
1. Triage uploaded documents in parallel (or use pre-computed analyses)
2. Assemble the prompt and make one generator call under a hard timeout
3. On invocation failure, substitute the fixed fallback schedule
4. Recover and normalize the output into canonical activities

The orchestrator never raises. Severity is visible only in the result's
summary and recommendations, an empty activity list, and `degraded`.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from config import settings
from contracts import (
    DocumentAnalysis,
    DocumentInsights,
    Err,
    ExtractedInfo,
    PipelineFailure,
    ScheduleRequest,
    ScheduleResult,
    TaskType,
)
from agents import SchedulerAgent, TokenUsage, format_document_block, format_document_excerpt
from logging_config import get_request_logger
from orchestrator.fallback import fallback_output
from orchestrator.request_state import GenerationStage, GenerationState
from providers import LLMProvider
from recovery import (
    NormalizationReport,
    Strategy,
    extract_payload,
    filter_lookahead,
    normalize_activities,
    normalize_payload,
)
from storage import ContentStore
from triage import DocumentAnalyzer, estimate_tokens


@dataclass
class GenerationOutcome:
    """Everything one request produced."""
    result: ScheduleResult
    degraded: bool
    state: GenerationState
    strategy: Optional[Strategy] = None
    usage: Optional[TokenUsage] = None
    report: Optional[NormalizationReport] = None
    failure: Optional[PipelineFailure] = None

    @property
    def cost_usd(self) -> float:
        return self.usage.total_cost if self.usage else 0.0


class GenerationOrchestrator:
    """Runs schedule generation requests.

    Holds only configuration; every request gets its own agent and state,
    so one orchestrator can serve concurrent requests.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        store: Optional[ContentStore] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        progress_messages: Optional[Sequence[Tuple[float, str]]] = None,
    ):
        """Initialize the orchestrator.

        Args:
            provider: LLM provider shared by requests; defaults to LiteLLM per request model
            store: Content store for uploaded document paths
            model: Default model when a request does not name one
            timeout_seconds: Generator timeout; defaults to settings.generation_timeout_seconds
            progress_messages: (delay, message) pairs shown while generating
        """
        self.provider = provider
        self.store = store
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.progress_messages = progress_messages

    def _analyzer(self, model: Optional[str]) -> DocumentAnalyzer:
        return DocumentAnalyzer(store=self.store, model=model)

    def prepare_documents(
        self,
        request: ScheduleRequest,
        analyzer: Optional[DocumentAnalyzer] = None,
    ) -> Tuple[str, Optional[DocumentInsights]]:
        """Triage documents and render the prompt block plus merged insights.

        Pre-computed analyses take precedence over uploaded paths. Returns
        ("", None) when the request carries no documents.
        """
        if not request.document_analyses and not request.uploaded_files:
            return "", None

        analyzer = analyzer or self._analyzer(request.model or self.model)
        options = request.processing
        analyses: List[DocumentAnalysis] = request.document_analyses or analyzer.analyze_documents(
            request.uploaded_files, options.selected_section_ids
        )

        info = ExtractedInfo()
        excerpts = []
        total_tokens = 0
        total_sections = 0

        for analysis in analyses:
            if analysis.failed:
                continue

            sections = analyzer.select_sections(analysis, options)
            content = analyzer.materialize_content(analysis, options)
            tokens = estimate_tokens(content)
            total_tokens += tokens
            total_sections += len(sections)

            key = analysis.key_information
            if key.contract_duration:
                info.contract_duration = key.contract_duration
            if key.project_type:
                info.project_type = key.project_type
            for key_date in (key.start_date, key.end_date):
                if key_date and key_date not in info.key_dates:
                    info.key_dates.append(key_date)
            info.milestones.extend(key.milestones)
            info.constraints.extend(key.constraints)

            if content.strip():
                excerpts.append(format_document_excerpt(analysis, content, tokens, len(sections)))

        insights = DocumentInsights(
            extracted_info=info,
            tokens_used=total_tokens,
            sections_processed=total_sections,
        )
        return format_document_block(excerpts, total_tokens, total_sections), insights

    def generate(self, request: ScheduleRequest, state: Optional[GenerationState] = None) -> GenerationOutcome:
        """Run one request end to end. Never raises."""
        state = state or GenerationState()
        log = get_request_logger(state.request_id)
        try:
            return self._generate(request, state, log)
        except Exception as e:
            log.exception(f"Schedule generation failed: {e}")
            result = ScheduleResult(
                activities=[],
                summary=f"Schedule generation failed: {e}",
            )
            return GenerationOutcome(result=result, degraded=False, state=state)
        finally:
            state.finish()

    def _generate(self, request: ScheduleRequest, state: GenerationState, log) -> GenerationOutcome:
        state.set_stage(GenerationStage.TRIAGE, "Analyzing documents...")
        documents, insights = self.prepare_documents(request)
        if insights is not None:
            log.info(
                f"Document triage complete: {insights.tokens_used:,} tokens "
                f"from {insights.sections_processed} sections"
            )

        agent = SchedulerAgent(
            provider=self.provider,
            model=request.model or self.model,
            timeout_seconds=self.timeout_seconds,
        )
        log.info(f"Invoking generator: type={request.type.value} model={agent.model}")

        state.start_generating(self.progress_messages)
        invocation = agent.run(request, documents, settings.lookahead_window_days)
        state.cancel_pending()

        failure = None
        if isinstance(invocation, Err):
            failure = invocation.failure
            state.degraded = True
            log.warning(f"Generator unavailable, using fallback schedule: {failure.message}")
            raw = fallback_output(request.start_date)
        else:
            raw = invocation.value.content

        state.set_stage(GenerationStage.RECOVERING, "Recovering schedule from model output...")
        extraction = extract_payload(raw)
        if isinstance(extraction, Err):
            log.warning("Recovery cascade exhausted; returning empty schedule")
            return GenerationOutcome(
                result=ScheduleResult(activities=[], summary=extraction.failure.message, document_insights=insights),
                degraded=state.degraded,
                state=state,
                usage=agent.total_usage,
                failure=extraction.failure,
            )

        strategy = extraction.value.strategy
        log.info(f"Recovered model output via {strategy.value}")
        result, report = normalize_payload(extraction.value.payload, request.start_date)

        if request.type == TaskType.LOOKAHEAD and not state.degraded:
            result = self._apply_lookahead(result, request)

        result = result.model_copy(update={"document_insights": insights})
        log.info(
            f"Schedule ready: {len(result.activities)} activities, "
            f"{len(result.critical_path)} critical, degraded={state.degraded}"
        )
        return GenerationOutcome(
            result=result,
            degraded=state.degraded,
            state=state,
            strategy=strategy,
            usage=agent.total_usage,
            report=report,
            failure=failure,
        )

    def _apply_lookahead(self, result: ScheduleResult, request: ScheduleRequest) -> ScheduleResult:
        window = filter_lookahead(result.activities, request.start_date)
        if len(window) == len(result.activities):
            return result
        # Links to activities outside the window become dangling
        activities, _ = normalize_activities(window, request.start_date)
        return ScheduleResult(
            activities=activities,
            summary=result.summary,
            recommendations=result.recommendations,
        )
