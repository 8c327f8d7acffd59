"""Result models for each LLM-backed analysis task and the aggregate report.

Each task model doubles as the wire schema the model is prompted to emit: field
types and bounds declared here are what ``services.response_coercer`` validates
against (strictly, no type coercion) before a value is accepted.
"""

from typing import List, Literal, Optional

from pydantic import Field

from .base import CamelModel
from .pii import PIIFindings
from .resume import ResumeMetadata

SeniorityLevel = Literal["Intern", "Junior", "Mid", "Senior", "Lead", "Executive", "Unknown"]

Score = float


class RoleResult(CamelModel):
    detected_role: str = Field(..., description="Primary role based on resume content")
    confidence: float = Field(..., ge=0, le=100)
    alternative_roles: List[str] = Field(...)
    reasoning: str = Field(default="", description="Why this role was detected")


class SeniorityResult(CamelModel):
    level: SeniorityLevel
    confidence: float = Field(..., ge=0, le=100)
    indicators: List[str] = Field(...)
    years_experience: float = Field(..., ge=0)


class QuantificationResult(CamelModel):
    metrics_found: List[str] = Field(...)
    missing_metrics: List[str] = Field(default_factory=list)
    score: Score = Field(..., ge=0, le=100)


class ActionVerbResult(CamelModel):
    strong_verbs: List[str] = Field(...)
    weak_verbs: List[str] = Field(...)
    suggestions: List[str] = Field(...)
    score: Score = Field(..., ge=0, le=100)


class SoftSkillsResult(CamelModel):
    leadership: float = Field(..., ge=0, le=100)
    communication: float = Field(..., ge=0, le=100)
    problem_solving: float = Field(..., ge=0, le=100)
    teamwork: float = Field(..., ge=0, le=100)
    adaptability: float = Field(..., ge=0, le=100)
    inferred_qualities: List[str] = Field(...)


class ConsistencyResult(CamelModel):
    date_format_issues: List[str] = Field(...)
    tense_issues: List[str] = Field(...)
    formatting_issues: List[str] = Field(...)
    score: Score = Field(..., ge=0, le=100)


class DetailedScores(CamelModel):
    """Eight category scores, each in [0, 100]."""

    contact_information: Score = Field(..., ge=0, le=100)
    work_experience: Score = Field(..., ge=0, le=100)
    education: Score = Field(..., ge=0, le=100)
    skills: Score = Field(..., ge=0, le=100)
    formatting: Score = Field(..., ge=0, le=100)
    quantification: Score = Field(..., ge=0, le=100)
    action_verbs: Score = Field(..., ge=0, le=100)
    consistency: Score = Field(..., ge=0, le=100)

    def as_list(self) -> List[Score]:
        return [getattr(self, name) for name in type(self).model_fields]


class LengthOptimization(CamelModel):
    current_length: int
    recommended_length: int
    suggestions: List[str] = Field(default_factory=list)


class MoodVariants(CamelModel):
    """Tone-specific renderings of the factual report text. Scores are untouched."""

    summary: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)


class AnalysisReport(CamelModel):
    overall_score: int = Field(..., ge=0, le=100, description="Rounded mean of the eight category scores")
    detailed_scores: DetailedScores
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    extracted_skills: List[str] = Field(default_factory=list)
    summary: str = ""
    role_alignment: RoleResult
    seniority_estimation: SeniorityResult
    quantification_analysis: QuantificationResult
    action_verb_analysis: ActionVerbResult
    soft_skills_inference: SoftSkillsResult
    consistency_check: ConsistencyResult
    pii_detected: PIIFindings
    length_optimization: LengthOptimization
    missing_sections: List[str] = Field(default_factory=list)
    resume_metadata: Optional[ResumeMetadata] = None
    mood: str = "professional"
    mood_variants: Optional[MoodVariants] = None


class JobMatchResult(CamelModel):
    """Resume vs job-description comparison."""

    overall_match: Score = Field(..., ge=0, le=100)
    skills_match: Score = Field(..., ge=0, le=100)
    experience_match: Score = Field(..., ge=0, le=100)
    missing_skills: List[str] = Field(...)
    matching_skills: List[str] = Field(...)
    recommendations: List[str] = Field(...)
