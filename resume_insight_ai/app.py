"""
Resume Insight AI – Streamlit frontend.
No business logic in layout; extraction and analysis live in cv_pipeline/agents.
"""

import json
from typing import List, Optional

import streamlit as st

from resume_insight_ai.agents.analysis_orchestrator import run_analysis, run_job_match
from resume_insight_ai.config import AVAILABLE_MOODS, DEFAULT_MOOD, LLM_API_KEY
from resume_insight_ai.errors import ResumeAnalysisError
from resume_insight_ai.schemas.analysis import AnalysisReport, JobMatchResult

UPLOAD_TYPES = ["pdf", "docx", "doc", "txt"]

SCORE_LABELS = {
    "contact_information": "Contact Information",
    "work_experience": "Work Experience",
    "education": "Education",
    "skills": "Skills",
    "formatting": "Formatting",
    "quantification": "Quantification",
    "action_verbs": "Action Verbs",
    "consistency": "Consistency",
}


def _bullets(items: List[str]) -> None:
    for item in items:
        st.markdown(f"- {item}")


def _export_json(report: AnalysisReport) -> bytes:
    """Report as camelCase JSON bytes."""
    return json.dumps(report.to_wire(), indent=2).encode("utf-8")


def _render_report(report: AnalysisReport) -> None:
    st.metric("Overall score", f"{report.overall_score}/100")
    cols = st.columns(4)
    for i, (field, label) in enumerate(SCORE_LABELS.items()):
        with cols[i % 4]:
            st.metric(label, f"{getattr(report.detailed_scores, field):.0f}")

    variants = report.mood_variants
    st.subheader("Summary")
    st.markdown(variants.summary if variants and variants.summary else report.summary)

    col_s, col_i = st.columns(2)
    with col_s:
        st.subheader("Strengths")
        _bullets(variants.strengths if variants else report.strengths)
    with col_i:
        st.subheader("Improvements")
        _bullets(variants.improvements if variants else report.improvements)

    st.subheader("Role & seniority")
    role = report.role_alignment
    seniority = report.seniority_estimation
    st.markdown(f"**Detected role:** {role.detected_role} ({role.confidence:.0f}% confidence)")
    if role.alternative_roles:
        st.caption("Alternatives: " + ", ".join(role.alternative_roles))
    st.markdown(f"**Level:** {seniority.level} · {seniority.years_experience:g} years")

    if report.extracted_skills:
        st.subheader("Skills")
        st.markdown(" ".join(f"`{s}`" for s in report.extracted_skills))

    with st.expander("Soft skills"):
        soft = report.soft_skills_inference
        for label, value in (
            ("Leadership", soft.leadership),
            ("Communication", soft.communication),
            ("Problem solving", soft.problem_solving),
            ("Teamwork", soft.teamwork),
            ("Adaptability", soft.adaptability),
        ):
            st.progress(int(value) / 100, text=f"{label}: {value:.0f}")
        if soft.inferred_qualities:
            st.caption(", ".join(soft.inferred_qualities))

    with st.expander("Action verbs & quantification"):
        st.markdown("**Strong verbs:** " + (", ".join(report.action_verb_analysis.strong_verbs) or "none"))
        st.markdown("**Weak verbs:** " + (", ".join(report.action_verb_analysis.weak_verbs) or "none"))
        _bullets(report.action_verb_analysis.suggestions)
        st.markdown("**Metrics found:**")
        _bullets(report.quantification_analysis.metrics_found)

    with st.expander("Consistency"):
        check = report.consistency_check
        _bullets(check.date_format_issues + check.tense_issues + check.formatting_issues)

    with st.expander("Personal information detected"):
        pii = report.pii_detected
        if not pii.categories_found:
            st.caption("No personal information detected.")
        for label, values in (
            ("Emails", pii.emails),
            ("Phones", pii.phones),
            ("Addresses", pii.addresses),
            ("Social media", pii.social_media),
        ):
            if values:
                st.markdown(f"**{label}:** " + ", ".join(values))

    if report.missing_sections:
        st.caption("Missing sections: " + ", ".join(report.missing_sections))
    length = report.length_optimization
    st.caption(f"Length: {length.current_length} characters (recommended ~{length.recommended_length})")
    _bullets(length.suggestions)

    st.download_button(
        "Export report (JSON)",
        data=_export_json(report),
        file_name="resume_analysis.json",
        mime="application/json",
        key="export_json",
    )


def _render_job_match(match: JobMatchResult) -> None:
    cols = st.columns(3)
    cols[0].metric("Overall match", f"{match.overall_match:.0f}%")
    cols[1].metric("Skills match", f"{match.skills_match:.0f}%")
    cols[2].metric("Experience match", f"{match.experience_match:.0f}%")
    st.markdown("**Matching skills:** " + (", ".join(match.matching_skills) or "none"))
    st.markdown("**Missing skills:** " + (", ".join(match.missing_skills) or "none"))
    _bullets(match.recommendations)


def render_layout() -> None:
    """Streamlit page layout; analysis runs through the orchestrator."""
    st.set_page_config(page_title="Resume Insight AI", layout="wide")
    st.title("Resume Insight AI")
    st.markdown("*Upload a resume for an AI-powered review of role fit, skills and writing quality.*")
    st.divider()

    for key, default in (("report", None), ("resume_text", ""), ("error", None), ("job_match", None)):
        if key not in st.session_state:
            st.session_state[key] = default

    with st.sidebar:
        st.subheader("API key")
        use_own_key = st.toggle("Use my own API key", value=not LLM_API_KEY, key="use_own_key")
        own_key: Optional[str] = None
        if use_own_key:
            own_key = st.text_input("Groq API key", type="password", key="own_key") or None
        mood = st.selectbox(
            "Feedback tone",
            options=AVAILABLE_MOODS,
            index=AVAILABLE_MOODS.index(DEFAULT_MOOD),
            format_func=str.title,
            key="mood",
        )

    uploaded = st.file_uploader("Resume file", type=UPLOAD_TYPES, key="resume_file")
    analyze_clicked = st.button("Analyze", type="primary", key="analyze_btn", disabled=uploaded is None)

    if analyze_clicked and uploaded is not None:
        if use_own_key and not own_key:
            st.session_state["error"] = "Enter your API key or switch back to the provided key."
        else:
            st.session_state["error"] = None
            st.session_state["job_match"] = None
            file_bytes = uploaded.getvalue()
            with st.spinner("Extracting text and analyzing your resume…"):
                try:
                    outcome = run_analysis(
                        file_bytes,
                        uploaded.name,
                        media_type=uploaded.type or "",
                        mood=mood,
                        api_key=own_key,
                    )
                    st.session_state["report"] = outcome.report
                    st.session_state["resume_text"] = outcome.resume_text
                except ResumeAnalysisError as e:
                    st.session_state["error"] = e.user_message()
                    st.session_state["report"] = None

    if st.session_state.get("error"):
        st.error(st.session_state["error"])

    report: Optional[AnalysisReport] = st.session_state.get("report")
    if report is None:
        if not st.session_state.get("error"):
            st.info("Upload a PDF, Word or text resume, then click **Analyze**.")
        return

    _render_report(report)

    st.divider()
    st.subheader("Compare with a job description")
    job_description = st.text_area("Job description", key="job_description", height=200)
    if st.button("Compare", key="compare_btn", disabled=not job_description.strip()):
        with st.spinner("Comparing resume with the job description…"):
            try:
                st.session_state["job_match"] = run_job_match(
                    st.session_state["resume_text"], job_description, api_key=own_key
                )
            except ResumeAnalysisError as e:
                st.error(e.user_message())
    if st.session_state.get("job_match"):
        _render_job_match(st.session_state["job_match"])


if __name__ == "__main__":
    render_layout()
