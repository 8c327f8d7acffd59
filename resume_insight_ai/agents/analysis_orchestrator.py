"""Analysis orchestrator: extract, fan out the analysis tasks concurrently, aggregate one report."""

import asyncio
import logging
from enum import Enum
from typing import Any, List, NamedTuple, Optional

from resume_insight_ai.agents import prompts
from resume_insight_ai.agents.analysis_tasks import ANALYSIS_TASKS, generate_summary, run_task
from resume_insight_ai.config import DEFAULT_MOOD, MAX_PROMPT_CHARS, MIN_CONTENT_CHARS, RECOMMENDED_RESUME_CHARS
from resume_insight_ai.cv_pipeline.sectionizer import SECTION_TITLES, parse_resume
from resume_insight_ai.cv_pipeline.text_extractor import TextExtractor
from resume_insight_ai.errors import AnalysisFailed, ContentTooShortError, ResumeAnalysisError
from resume_insight_ai.schemas.analysis import (
    ActionVerbResult,
    AnalysisReport,
    ConsistencyResult,
    DetailedScores,
    JobMatchResult,
    LengthOptimization,
    QuantificationResult,
    RoleResult,
    SeniorityResult,
    SoftSkillsResult,
)
from resume_insight_ai.schemas.document import Document
from resume_insight_ai.schemas.pii import PIIFindings
from resume_insight_ai.schemas.resume import SECTION_ORDER, ParsedResume
from resume_insight_ai.services.llm_gateway import LLMGateway
from resume_insight_ai.services.mood import apply_mood_to_report
from resume_insight_ai.services.pii_scanner import detect_pii
from resume_insight_ai.services.response_coercer import coerce_to_schema
from resume_insight_ai.utils.helpers import dedupe_preserving_order, round_half_up
from resume_insight_ai.utils.logger import get_logger

logger = get_logger(__name__)

# No dedicated analysis exists for these categories yet
WORK_EXPERIENCE_SCORE = 80
EDUCATION_SCORE = 75
FORMATTING_SCORE = 85

CONTACT_BASE_SCORE = 20
CONTACT_CATEGORY_POINTS = {"emails": 35, "phones": 25, "social_media": 15, "addresses": 5}

SKILLS_PRESENT_SCORE = 90
SKILLS_ABSENT_SCORE = 20

GOOD_SCORE = 70

JOB_MATCH_FALLBACK = JobMatchResult(
    overall_match=0,
    skills_match=0,
    experience_match=0,
    missing_skills=[],
    matching_skills=[],
    recommendations=["Analysis failed - please try again"],
)


class AnalysisState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    ANALYZING = "analyzing"
    AGGREGATING = "aggregating"
    COMPLETE = "complete"
    FAILED = "failed"


def contact_information_score(pii: PIIFindings) -> int:
    """Score contact completeness by which PII categories were found."""
    score = CONTACT_BASE_SCORE
    for category, points in CONTACT_CATEGORY_POINTS.items():
        if getattr(pii, category):
            score += points
    return min(score, 100)


def compute_detailed_scores(
    pii: PIIFindings,
    skills: List[str],
    quantification: QuantificationResult,
    action_verbs: ActionVerbResult,
    consistency: ConsistencyResult,
) -> DetailedScores:
    return DetailedScores(
        contact_information=contact_information_score(pii),
        work_experience=WORK_EXPERIENCE_SCORE,
        education=EDUCATION_SCORE,
        skills=SKILLS_PRESENT_SCORE if skills else SKILLS_ABSENT_SCORE,
        formatting=FORMATTING_SCORE,
        quantification=quantification.score,
        action_verbs=action_verbs.score,
        consistency=consistency.score,
    )


def overall_score(scores: DetailedScores) -> int:
    """Unweighted mean of the category scores, rounded half up."""
    values = scores.as_list()
    return round_half_up(sum(values) / len(values))


def missing_sections(parsed: ParsedResume) -> List[str]:
    """Display names of canonical sections the parser found empty."""
    return [
        SECTION_TITLES[name].title()
        for name in SECTION_ORDER
        if name != "other" and not getattr(parsed.sections, name)
    ]


def length_optimization(text: str) -> LengthOptimization:
    current = len(text)
    suggestions: List[str] = []
    if current > RECOMMENDED_RESUME_CHARS * 2:
        suggestions.append("Condense older roles and remove details that do not support your target role")
    elif current < RECOMMENDED_RESUME_CHARS // 2:
        suggestions.append("Add more detail on responsibilities, results and tools used")
    return LengthOptimization(
        current_length=current,
        recommended_length=RECOMMENDED_RESUME_CHARS,
        suggestions=suggestions,
    )


def build_strengths(
    role: RoleResult,
    seniority: SeniorityResult,
    skills: List[str],
    quantification: QuantificationResult,
    action_verbs: ActionVerbResult,
) -> List[str]:
    detected = role.detected_role if role.detected_role != "Unknown" else "professional"
    level = seniority.level if seniority.level != "Unknown" else "Professional"
    strengths = [
        f"Strong {detected} background",
        f"{len(skills)} technical skills identified",
        f"{level} level experience",
    ]
    if quantification.score >= GOOD_SCORE and quantification.metrics_found:
        strengths.append("Achievements are backed by measurable results")
    if action_verbs.strong_verbs:
        strengths.append(f"Uses strong action verbs such as {', '.join(action_verbs.strong_verbs[:3])}")
    return strengths


def build_improvements(
    quantification: QuantificationResult,
    action_verbs: ActionVerbResult,
    consistency: ConsistencyResult,
    missing: List[str],
) -> List[str]:
    improvements: List[str] = []
    if quantification.score < GOOD_SCORE:
        improvements.append("Consider adding more quantified achievements")
    if action_verbs.score < GOOD_SCORE or action_verbs.weak_verbs:
        hint = "Strengthen action verbs in job descriptions"
        if action_verbs.weak_verbs:
            hint += f" (replace {', '.join(action_verbs.weak_verbs[:3])})"
        improvements.append(hint)
    if consistency.score < GOOD_SCORE or consistency.date_format_issues or consistency.tense_issues:
        improvements.append("Ensure consistent formatting throughout")
    for section in missing:
        if section in ("Summary", "Experience", "Skills", "Education"):
            improvements.append(f"Add a {section} section")
    if not improvements:
        improvements.append("Tailor the resume to each role you apply for")
    return improvements


class ResumeAnalysisOrchestrator:
    """
    One analysis run: Idle -> Extracting -> Analyzing -> Aggregating -> Complete,
    or Failed from any step. A gateway failure in any task aborts the run; siblings
    still in flight are cancelled and no partial report is returned.
    """

    def __init__(
        self,
        gateway: LLMGateway,
        extractor: Optional[TextExtractor] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._gateway = gateway
        self._extractor = extractor or TextExtractor()
        self._logger = log or logger
        self.state = AnalysisState.IDLE
        self.resume_text = ""

    def _transition(self, state: AnalysisState) -> None:
        self._logger.info("Analysis state: %s -> %s", self.state.value, state.value)
        self.state = state

    async def analyze(self, document: Document, mood: str = DEFAULT_MOOD) -> AnalysisReport:
        try:
            self._transition(AnalysisState.EXTRACTING)
            text = await asyncio.to_thread(self._extractor.extract, document)
            self.resume_text = text
            if len(text.strip()) < MIN_CONTENT_CHARS:
                raise ContentTooShortError(len(text.strip()), MIN_CONTENT_CHARS)
            parsed = parse_resume(text, log=self._logger)

            self._transition(AnalysisState.ANALYZING)
            results = await self._fan_out(text)
            role, skills, seniority, quantification, action_verbs, soft_skills, consistency, pii = results
            skills = dedupe_preserving_order(skills, key=str.lower)
            summary = await generate_summary(self._gateway, text, role, seniority, skills, log=self._logger)

            self._transition(AnalysisState.AGGREGATING)
            report = self._aggregate(
                text, parsed, role, skills, seniority, quantification, action_verbs, soft_skills, consistency, pii, summary
            )
            report = apply_mood_to_report(report, mood)
        except (ResumeAnalysisError, asyncio.CancelledError):
            self._transition(AnalysisState.FAILED)
            raise
        except Exception as e:
            self._transition(AnalysisState.FAILED)
            self._logger.exception("Resume analysis failed: %s", e)
            raise AnalysisFailed(e) from e

        self._transition(AnalysisState.COMPLETE)
        self._logger.info(
            "Analysis finished: overall=%s role=%s level=%s skills=%s",
            report.overall_score,
            report.role_alignment.detected_role,
            report.seniority_estimation.level,
            len(report.extracted_skills),
        )
        return report

    async def _fan_out(self, text: str) -> List[Any]:
        """Run every analysis task plus the local PII scan concurrently; fail fast."""
        self._logger.info("Starting %s analysis tasks concurrently", len(ANALYSIS_TASKS))
        jobs = [asyncio.ensure_future(run_task(self._gateway, task, text, log=self._logger)) for task in ANALYSIS_TASKS]
        jobs.append(asyncio.ensure_future(asyncio.to_thread(detect_pii, text)))
        try:
            results = await asyncio.gather(*jobs)
        except BaseException:
            pending = [job for job in jobs if not job.done()]
            for job in pending:
                job.cancel()
            # Drain so cancelled/failed siblings do not log unretrieved exceptions.
            await asyncio.gather(*jobs, return_exceptions=True)
            raise
        self._logger.info("All analysis tasks finished")
        return list(results)

    def _aggregate(
        self,
        text: str,
        parsed: ParsedResume,
        role: RoleResult,
        skills: List[str],
        seniority: SeniorityResult,
        quantification: QuantificationResult,
        action_verbs: ActionVerbResult,
        soft_skills: SoftSkillsResult,
        consistency: ConsistencyResult,
        pii: PIIFindings,
        summary: str,
    ) -> AnalysisReport:
        scores = compute_detailed_scores(pii, skills, quantification, action_verbs, consistency)
        missing = missing_sections(parsed)
        return AnalysisReport(
            overall_score=overall_score(scores),
            detailed_scores=scores,
            strengths=build_strengths(role, seniority, skills, quantification, action_verbs),
            improvements=build_improvements(quantification, action_verbs, consistency, missing),
            extracted_skills=skills,
            summary=summary,
            role_alignment=role,
            seniority_estimation=seniority,
            quantification_analysis=quantification,
            action_verb_analysis=action_verbs,
            soft_skills_inference=soft_skills,
            consistency_check=consistency,
            pii_detected=pii,
            length_optimization=length_optimization(text),
            missing_sections=missing,
            resume_metadata=parsed.metadata,
        )


async def analyze_resume(document: Document, mood: str = DEFAULT_MOOD, api_key: Optional[str] = None) -> AnalysisReport:
    """Analyze one uploaded resume. ``api_key`` switches to the caller's own key."""
    gateway = LLMGateway.from_config(api_key)
    return await ResumeAnalysisOrchestrator(gateway).analyze(document, mood)


async def compare_with_job_description(
    resume_text: str,
    job_description: str,
    gateway: Optional[LLMGateway] = None,
    api_key: Optional[str] = None,
) -> JobMatchResult:
    """Match resume text against a job description. Malformed replies degrade to a zero match."""
    gateway = gateway or LLMGateway.from_config(api_key)
    messages = [
        {"role": "system", "content": prompts.JOB_MATCH_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": prompts.JOB_MATCH_USER_TEMPLATE.format(
                resume_text=resume_text[:MAX_PROMPT_CHARS],
                job_description=job_description[:MAX_PROMPT_CHARS],
            ),
        },
    ]
    raw = await gateway.complete(messages)
    return coerce_to_schema(raw, JobMatchResult, JOB_MATCH_FALLBACK)


class AnalysisOutcome(NamedTuple):
    report: AnalysisReport
    resume_text: str


def run_analysis(
    file_bytes: bytes,
    filename: str,
    media_type: str = "",
    mood: str = DEFAULT_MOOD,
    api_key: Optional[str] = None,
) -> AnalysisOutcome:
    """
    Sync entry point for the Streamlit front end (fresh event loop per call).
    Returns the report with the text it was built from, so follow-up comparisons
    do not extract the file again.
    """
    document = Document(content=file_bytes, media_type=media_type, filename=filename)
    orchestrator = ResumeAnalysisOrchestrator(LLMGateway.from_config(api_key))
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        report = loop.run_until_complete(orchestrator.analyze(document, mood))
    finally:
        loop.close()
    return AnalysisOutcome(report, orchestrator.resume_text)


def run_job_match(resume_text: str, job_description: str, api_key: Optional[str] = None) -> JobMatchResult:
    """Sync wrapper around compare_with_job_description."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(compare_with_job_description(resume_text, job_description, api_key=api_key))
    finally:
        loop.close()
