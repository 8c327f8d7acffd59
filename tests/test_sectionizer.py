import pytest

from resume_insight_ai.cv_pipeline.sectionizer import (
    create_structured_text,
    detect_section_header,
    extract_sections,
    normalize_text,
    parse_resume,
    validate_parsed_resume,
)
from resume_insight_ai.errors import ContentTooShortError
from resume_insight_ai.schemas.resume import SECTION_ORDER, ResumeSections

UNSTRUCTURED = """Built internal dashboards for the sales team
Maintained legacy payment code for three years
Volunteer coding mentor at weekend bootcamps
"""


def test_normalize_is_idempotent():
    messy = (
        "Jane Doe\r\nSoftware engineer with a focus on\r\nreliable backend systems.\f"
        "Page 2\n\n\n\n• Built APIs\n1) Wrote tests\n* Reviewed code.\n  b. Deployed   services  \n"
        "Phone: +1 555 123 4567\n"
    )
    once = normalize_text(messy)
    assert normalize_text(once) == once
    assert "\r" not in once
    assert "Page 2" not in once
    assert "\n\n\n" not in once
    assert "focus on reliable backend systems." in once
    assert "- Built APIs" in once
    assert "- Wrote tests" in once
    assert "- Reviewed code." in once
    assert "- Deployed services" in once
    assert "+1 555 123 4567" in once


def test_normalize_idempotent_on_sample(sample_resume):
    once = normalize_text(sample_resume)
    assert normalize_text(once) == once


@pytest.mark.parametrize(
    "line, section",
    [
        ("WORK EXPERIENCE", "experience"),
        ("Professional Experience:", "experience"),
        ("Technical Skills", "skills"),
        ("Education", "education"),
        ("Projects", "projects"),
        ("Licenses & Certifications", "certifications"),
        ("Profile", "summary"),
        ("Led a team of five engineers", None),
    ],
)
def test_detect_section_header(line, section):
    assert detect_section_header(line) == section


def test_parse_resume_assigns_sections(sample_resume):
    parsed = parse_resume(sample_resume)
    sections = parsed.sections
    assert sections.contact_info.split("\n") == [
        "Jane Doe",
        "Email: jane.doe@example.com | (555) 123-4567 | linkedin.com/in/janedoe",
    ]
    assert sections.summary == "Backend engineer with eight years of experience building distributed systems."
    assert sections.experience.startswith("Senior Engineer, Acme Corp (2019 - Present)")
    assert "- Mentored five engineers" in sections.experience
    assert sections.skills == "Python, PostgreSQL, Kubernetes"
    assert sections.education == "B.S. Computer Science, State University"
    assert sections.other == ""
    assert parsed.metadata.has_structure is True
    assert parsed.metadata.sections_found == ["contact_info", "summary", "experience", "skills", "education"]
    assert parsed.metadata.original_length == len(sample_resume)
    assert parsed.metadata.cleaned_length == len(parsed.clean_text)


def test_every_line_lands_in_exactly_one_section(sample_resume):
    normalized = normalize_text(sample_resume)
    sections, _ = extract_sections(normalized)
    section_lines = {name: getattr(sections, name).split("\n") for name in SECTION_ORDER}
    for line in normalized.split("\n"):
        if not line or detect_section_header(line):
            continue
        owners = [name for name, lines in section_lines.items() if line in lines]
        assert len(owners) == 1, line


def test_no_headers_puts_everything_in_other():
    parsed = parse_resume(UNSTRUCTURED)
    assert parsed.metadata.has_structure is False
    assert parsed.sections.other.split("\n") == [
        "Built internal dashboards for the sales team",
        "Maintained legacy payment code for three years",
        "Volunteer coding mentor at weekend bootcamps",
    ]
    assert parsed.metadata.sections_found == ["other"]


def test_too_short_input_raises():
    with pytest.raises(ContentTooShortError) as exc_info:
        parse_resume("Jane Doe\nPython")
    assert exc_info.value.char_count == len("Jane Doe\nPython")


def test_structured_text_uses_canonical_order():
    sections = ResumeSections(education="BSc", skills="Python", experience="Engineer", contact_info="Jane")
    text = create_structured_text(sections)
    assert text == (
        "=== CONTACT INFO ===\nJane\n\n"
        "=== EXPERIENCE ===\nEngineer\n\n"
        "=== SKILLS ===\nPython\n\n"
        "=== EDUCATION ===\nBSc"
    )


def test_validate_flags_unstructured_resume():
    is_valid, issues = validate_parsed_resume(parse_resume(UNSTRUCTURED))
    assert not is_valid
    assert "No clear sections detected in resume" in issues
    assert "No work experience or skills section found" in issues


def test_validate_accepts_structured_resume(sample_resume):
    is_valid, issues = validate_parsed_resume(parse_resume(sample_resume))
    assert is_valid, issues


def test_location_under_experience_stays_in_experience():
    text = (
        "Jane Doe\njane@example.com\n\nExperience\nSenior Engineer\nAcme Corp, Austin, TX\n"
        "- Led migration of billing services to Python\n"
    )
    sections = parse_resume(text).sections
    assert sections.contact_info.split("\n") == ["Jane Doe", "jane@example.com"]
    assert sections.experience.split("\n") == [
        "Senior Engineer",
        "Acme Corp, Austin, TX",
        "- Led migration of billing services to Python",
    ]


def test_contact_header_block_is_claimed():
    text = (
        "Contact\nAustin, TX\njane@example.com\n\nExperience\nAcme Corp, Denver, CO\n"
        "- Built the billing pipeline in Python\n"
    )
    sections = parse_resume(text).sections
    assert sections.contact_info.split("\n") == ["Austin, TX", "jane@example.com"]
    assert "Acme Corp, Denver, CO" in sections.experience


def test_soft_wrap_does_not_join_contact_lines():
    text = "Jane Doe\njane@example.com\nlinkedin.com/in/janedoe\nengineer focused on\nreliable systems"
    once = normalize_text(text)
    assert once.split("\n") == [
        "Jane Doe",
        "jane@example.com",
        "linkedin.com/in/janedoe",
        "engineer focused on reliable systems",
    ]
    assert normalize_text(once) == once
