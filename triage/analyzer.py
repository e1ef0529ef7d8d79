"""Document Triage Engine.

Partitions raw document text into scored, labeled sections, extracts key
facts, and prices the four processing modes. Unreadable documents produce
a zero-section analysis with a failure note instead of an exception.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from loguru import logger

from config import settings
from contracts import (
    Document,
    DocumentAnalysis,
    Err,
    FailureKind,
    KeyInformation,
    Ok,
    PipelineFailure,
    ProcessingBudget,
    ProcessingMode,
    ProcessingOptions,
    Result,
    Section,
)
from errors import DocumentUnreadable
from storage import ContentStore, LocalContentStore
from triage.key_facts import extract_key_information
from triage.scoring import (
    calculate_relevance_score,
    categorize_content,
    estimate_tokens,
    extract_keywords,
)
from triage.segmenter import split_into_segments


TRUNCATION_MARKER = "... [Content truncated to fit token limit]"
# Words kept per token of budget when truncating
WORDS_PER_TOKEN = 0.75


class DocumentAnalyzer:
    """Segments, scores and budgets documents.

    Thresholds and window sizes come from settings unless overridden, so they
    can be tuned without touching the heuristics.
    """

    def __init__(
        self,
        store: Optional[ContentStore] = None,
        model: Optional[str] = None,
        auto_select_threshold: Optional[int] = None,
        high_relevance_threshold: Optional[int] = None,
        chunk_size: Optional[int] = None,
        min_section_chars: Optional[int] = None,
    ):
        """Initialize the analyzer.

        Args:
            store: Content store used by analyze_document(s); defaults to the local filesystem
            model: Model id used to price budgets
            auto_select_threshold: Score above which a section is auto-selected
            high_relevance_threshold: Score above which a section is used in quick mode
            chunk_size: Window size for fixed-size chunking
            min_section_chars: Minimum stripped length for a section to be kept
        """
        self.store = store or LocalContentStore(settings.documents_dir)
        self.model = model or settings.default_model
        self.auto_select_threshold = (
            settings.triage_auto_select_threshold if auto_select_threshold is None else auto_select_threshold
        )
        self.high_relevance_threshold = (
            settings.triage_high_relevance_threshold if high_relevance_threshold is None else high_relevance_threshold
        )
        self.chunk_size = chunk_size or settings.triage_chunk_size_chars
        self.min_section_chars = settings.triage_min_section_chars if min_section_chars is None else min_section_chars

    # --- reading -----------------------------------------------------------

    def read_document(self, path: str) -> Result[Document]:
        """Read one document through the content store.

        I/O errors a store lets escape are reported for this document only.
        """
        try:
            text = self.store.read_object_content(path)
        except DocumentUnreadable as e:
            return Err(PipelineFailure(FailureKind.DOCUMENT_UNREADABLE, e.reason, detail=e.path))
        except OSError as e:
            return Err(PipelineFailure(FailureKind.DOCUMENT_UNREADABLE, str(e) or type(e).__name__, detail=path))
        return Ok(Document(
            name=_file_name(path),
            path=path,
            raw_text=text,
            total_size_chars=len(text),
        ))

    def analyze_document(self, path: str, selected_section_ids: Optional[List[str]] = None) -> DocumentAnalysis:
        """Read and triage one document. Never raises for unreadable input."""
        outcome = self.read_document(path)
        if isinstance(outcome, Err):
            note = str(outcome.failure.to_exception())
            logger.warning(f"Failed to analyze document: {note}")
            return self._failed_analysis(path, note)
        return self.analyze_text(outcome.value, selected_section_ids)

    def analyze_documents(
        self,
        paths: List[str],
        selected_section_ids: Optional[List[str]] = None,
    ) -> List[DocumentAnalysis]:
        """Triage several documents in parallel; returns once all are done.

        Results keep the order of `paths`. One failure does not affect others.
        """
        if not paths:
            return []
        workers = min(settings.document_read_workers, len(paths))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda p: self.analyze_document(p, selected_section_ids), paths))

    # --- analysis ----------------------------------------------------------

    def analyze_text(
        self,
        document: Document,
        selected_section_ids: Optional[List[str]] = None,
    ) -> DocumentAnalysis:
        """Triage already-loaded document text."""
        total_tokens = estimate_tokens(document.raw_text)
        logger.info(
            f"Analyzing document {document.name}: "
            f"{document.total_size_chars:,} characters, ~{total_tokens:,} tokens"
        )

        sections = self.build_sections(document.raw_text, document.name)
        key_information = extract_key_information(document.raw_text)

        return DocumentAnalysis(
            file_name=document.name,
            file_path=document.path,
            total_size=document.total_size_chars,
            total_tokens=total_tokens,
            sections=sections,
            key_information=key_information,
            budgets=self.compute_budgets(sections, selected_section_ids),
        )

    def build_sections(self, text: str, file_name: str) -> List[Section]:
        """Segment and score text; result is ordered by descending relevance."""
        sections = []
        for segment in split_into_segments(text, self.chunk_size, self.min_section_chars):
            score = calculate_relevance_score(segment.content)
            sections.append(Section(
                id=f"{file_name}-section-{segment.index}",
                title=segment.title,
                content=segment.content,
                relevance_score=score,
                category=categorize_content(segment.content),
                token_estimate=estimate_tokens(segment.content),
                keywords=extract_keywords(segment.content, settings.triage_max_keywords),
                is_selected=score > self.auto_select_threshold,
            ))
        # sorted() is stable, so equal scores keep document order
        return sorted(sections, key=lambda s: s.relevance_score, reverse=True)

    def compute_budgets(
        self,
        sections: List[Section],
        selected_section_ids: Optional[List[str]] = None,
    ) -> Dict[ProcessingMode, ProcessingBudget]:
        """Price every processing mode up front."""
        high = [s for s in sections if s.relevance_score > self.high_relevance_threshold]
        selected = [s for s in sections if s.is_selected]
        wanted = set(selected_section_ids or [])
        custom = [s for s in sections if s.id in wanted]

        descriptions = {
            ProcessingMode.QUICK: (high, f"High relevance sections only ({len(high)} sections)"),
            ProcessingMode.STANDARD: (selected, f"Auto-selected relevant sections ({len(selected)} sections)"),
            ProcessingMode.DEEP: (sections, "Complete document analysis (all content)"),
            ProcessingMode.CUSTOM: (custom, f"Caller-selected sections ({len(custom)} sections)"),
        }

        budgets = {}
        for mode, (chosen, description) in descriptions.items():
            tokens = sum(s.token_estimate for s in chosen)
            budgets[mode] = ProcessingBudget(
                mode=mode,
                tokens=tokens,
                cost_usd=settings.estimate_input_cost(tokens, self.model),
                section_count=len(chosen),
                description=description,
            )
        return budgets

    # --- materialization ---------------------------------------------------

    def select_sections(self, analysis: DocumentAnalysis, options: ProcessingOptions) -> List[Section]:
        """Sections a processing mode sends to the generator, in score order."""
        ordered = sorted(analysis.sections, key=lambda s: s.relevance_score, reverse=True)
        if options.mode == ProcessingMode.QUICK:
            return [s for s in ordered if s.relevance_score > self.high_relevance_threshold]
        if options.mode == ProcessingMode.STANDARD:
            return [s for s in ordered if s.is_selected]
        if options.mode == ProcessingMode.DEEP:
            return ordered
        wanted = set(options.selected_section_ids or [])
        return [s for s in ordered if s.id in wanted]

    def materialize_content(self, analysis: DocumentAnalysis, options: ProcessingOptions) -> str:
        """Concatenate the chosen sections, truncating to the token ceiling if set.

        Truncation is lossy on purpose: the text is cut at a word boundary and
        a marker is appended.
        """
        content = "\n\n".join(s.content for s in self.select_sections(analysis, options))

        if options.max_tokens and estimate_tokens(content) > options.max_tokens:
            words = content.split(" ")
            target_words = math.floor(options.max_tokens * WORDS_PER_TOKEN)
            content = " ".join(words[:target_words]) + TRUNCATION_MARKER

        return content

    # --- helpers -----------------------------------------------------------

    def _failed_analysis(self, path: str, note: str) -> DocumentAnalysis:
        budgets = {
            mode: ProcessingBudget(mode=mode, tokens=0, cost_usd=0.0, section_count=0, description="Analysis failed")
            for mode in ProcessingMode
        }
        return DocumentAnalysis(
            file_name=_file_name(path),
            file_path=path,
            key_information=KeyInformation(),
            budgets=budgets,
            failure_note=note,
        )


def _file_name(path: str) -> str:
    return path.replace("\\", "/").rstrip("/").split("/")[-1] or path
