"""The independent LLM-backed analyses: prompt, expected schema and fallback per task."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from resume_insight_ai.agents import prompts
from resume_insight_ai.config import MAX_PROMPT_CHARS
from resume_insight_ai.errors import TransportError
from resume_insight_ai.schemas.analysis import (
    ActionVerbResult,
    ConsistencyResult,
    QuantificationResult,
    RoleResult,
    SeniorityResult,
    SoftSkillsResult,
)
from resume_insight_ai.services.llm_gateway import LLMGateway
from resume_insight_ai.services.response_coercer import coerce_to_schema
from resume_insight_ai.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AnalysisTask:
    """One analysis: system prompt + user instruction, target schema, fallback, optional post-processing."""

    name: str
    system_prompt: str
    instruction: str
    schema: Any
    fallback: Any
    postprocess: Optional[Callable[[Any], Any]] = None

    def messages(self, resume_text: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": f"{self.instruction}:\n\n{resume_text[:MAX_PROMPT_CHARS]}"},
        ]


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value or 0))


def clamp_soft_skills(result: SoftSkillsResult) -> SoftSkillsResult:
    """Force every soft-skill score into [0, 100] even after validation."""
    return result.model_copy(
        update={
            "leadership": _clamp(result.leadership),
            "communication": _clamp(result.communication),
            "problem_solving": _clamp(result.problem_solving),
            "teamwork": _clamp(result.teamwork),
            "adaptability": _clamp(result.adaptability),
            "inferred_qualities": list(result.inferred_qualities),
        }
    )


ROLE_TASK = AnalysisTask(
    name="role",
    system_prompt=prompts.ROLE_SYSTEM_PROMPT,
    instruction="Analyze this resume and detect the primary role",
    schema=RoleResult,
    fallback=RoleResult(detected_role="Unknown", confidence=0, alternative_roles=[], reasoning="Analysis failed"),
)

SKILLS_TASK = AnalysisTask(
    name="skills",
    system_prompt=prompts.SKILLS_SYSTEM_PROMPT,
    instruction="Extract the explicitly mentioned skills from this resume",
    schema=List[str],
    fallback=[],
)

SENIORITY_TASK = AnalysisTask(
    name="seniority",
    system_prompt=prompts.SENIORITY_SYSTEM_PROMPT,
    instruction="Analyze the seniority level from this resume",
    schema=SeniorityResult,
    fallback=SeniorityResult(level="Unknown", confidence=0, indicators=[], years_experience=0),
)

QUANTIFICATION_TASK = AnalysisTask(
    name="quantification",
    system_prompt=prompts.QUANTIFICATION_SYSTEM_PROMPT,
    instruction="Find quantified achievements in this resume",
    schema=QuantificationResult,
    fallback=QuantificationResult(metrics_found=[], missing_metrics=[], score=0),
)

ACTION_VERBS_TASK = AnalysisTask(
    name="action_verbs",
    system_prompt=prompts.ACTION_VERBS_SYSTEM_PROMPT,
    instruction="Analyze action verbs in this resume",
    schema=ActionVerbResult,
    fallback=ActionVerbResult(strong_verbs=[], weak_verbs=[], suggestions=[], score=0),
)

SOFT_SKILLS_TASK = AnalysisTask(
    name="soft_skills",
    system_prompt=prompts.SOFT_SKILLS_SYSTEM_PROMPT,
    instruction="Analyze soft skills from this resume",
    schema=SoftSkillsResult,
    fallback=SoftSkillsResult(
        leadership=0,
        communication=0,
        problem_solving=0,
        teamwork=0,
        adaptability=0,
        inferred_qualities=[],
    ),
    postprocess=clamp_soft_skills,
)

CONSISTENCY_TASK = AnalysisTask(
    name="consistency",
    system_prompt=prompts.CONSISTENCY_SYSTEM_PROMPT,
    instruction="Check consistency in this resume",
    schema=ConsistencyResult,
    fallback=ConsistencyResult(date_format_issues=[], tense_issues=[], formatting_issues=[], score=100),
)

# Dispatched concurrently by the orchestrator, in this order.
ANALYSIS_TASKS: List[AnalysisTask] = [
    ROLE_TASK,
    SKILLS_TASK,
    SENIORITY_TASK,
    QUANTIFICATION_TASK,
    ACTION_VERBS_TASK,
    SOFT_SKILLS_TASK,
    CONSISTENCY_TASK,
]


async def run_task(
    gateway: LLMGateway,
    task: AnalysisTask,
    resume_text: str,
    log: Optional[logging.Logger] = None,
) -> Any:
    """
    Prompt the model and coerce its reply into ``task.schema``. Malformed replies
    degrade to ``task.fallback``; transport errors propagate.
    """
    log = log or logger
    raw = await gateway.complete(task.messages(resume_text))
    log.info("Task %s: raw response %s characters", task.name, len(raw))
    result = coerce_to_schema(raw, task.schema, task.fallback, log=log)
    if result is task.fallback:
        log.warning("Task %s degraded to fallback value", task.name)
    if task.postprocess:
        result = task.postprocess(result)
    return result


def template_summary(role: RoleResult, seniority: SeniorityResult, skills: List[str]) -> str:
    """Deterministic summary used when the model returns nothing usable."""
    level = seniority.level if seniority.level != "Unknown" else "Professional"
    detected = role.detected_role if role.detected_role != "Unknown" else "candidate"
    years = f"{seniority.years_experience:g}" if seniority.years_experience else "several"
    focus = ", ".join(skills[:3]) if skills else "their field"
    return f"{level} {detected} with {years} years of experience in {focus} and related technologies."


def _clean_summary(raw: str) -> str:
    text = re.sub(r"```.*?```", "", raw or "", flags=re.S)
    text = re.sub(r"\*\*(.*?)\*\*", r"\1", text)
    text = re.sub(r"\*(.*?)\*", r"\1", text)
    return text.strip()


async def generate_summary(
    gateway: LLMGateway,
    resume_text: str,
    role: RoleResult,
    seniority: SeniorityResult,
    skills: List[str],
    log: Optional[logging.Logger] = None,
) -> str:
    """Narrative candidate summary; any transport failure falls back to a template."""
    log = log or logger
    messages = [
        {"role": "system", "content": prompts.SUMMARY_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": prompts.SUMMARY_USER_TEMPLATE.format(
                resume_text=resume_text[:MAX_PROMPT_CHARS],
                role=role.detected_role or "Professional",
                level=seniority.level or "Mid-level",
                years=f"{seniority.years_experience:g}" if seniority.years_experience else "several",
                skills=", ".join(skills[:8]),
            ),
        },
    ]
    try:
        raw = await gateway.complete(messages, temperature=0.3)
    except TransportError as e:
        log.warning("Summary generation failed (%s); using template summary", e)
        return template_summary(role, seniority, skills)
    return _clean_summary(raw) or template_summary(role, seniority, skills)
