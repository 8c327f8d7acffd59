"""Agent exports."""

from .analysis_orchestrator import (
    AnalysisOutcome,
    AnalysisState,
    ResumeAnalysisOrchestrator,
    analyze_resume,
    compare_with_job_description,
    run_analysis,
    run_job_match,
)
from .analysis_tasks import ANALYSIS_TASKS, AnalysisTask, generate_summary, run_task

__all__ = [
    "ANALYSIS_TASKS",
    "AnalysisOutcome",
    "AnalysisState",
    "AnalysisTask",
    "ResumeAnalysisOrchestrator",
    "analyze_resume",
    "compare_with_job_description",
    "generate_summary",
    "run_analysis",
    "run_job_match",
    "run_task",
]
