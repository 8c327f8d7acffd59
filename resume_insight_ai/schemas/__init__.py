"""Schema exports."""

from .analysis import (
    ActionVerbResult,
    AnalysisReport,
    ConsistencyResult,
    DetailedScores,
    JobMatchResult,
    LengthOptimization,
    MoodVariants,
    QuantificationResult,
    RoleResult,
    SeniorityResult,
    SoftSkillsResult,
)
from .document import Document
from .pii import PIIFindings
from .resume import SECTION_ORDER, ParsedResume, ResumeMetadata, ResumeSections

__all__ = [
    "ActionVerbResult",
    "AnalysisReport",
    "ConsistencyResult",
    "DetailedScores",
    "Document",
    "JobMatchResult",
    "LengthOptimization",
    "MoodVariants",
    "PIIFindings",
    "ParsedResume",
    "QuantificationResult",
    "ResumeMetadata",
    "ResumeSections",
    "RoleResult",
    "SECTION_ORDER",
    "SeniorityResult",
    "SoftSkillsResult",
]
