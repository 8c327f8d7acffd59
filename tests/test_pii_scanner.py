from resume_insight_ai.services.pii_scanner import detect_pii


def test_mixed_scenario():
    findings = detect_pii("a@b.com and 555-123-4567, see linkedin.com/in/janedoe")
    assert findings.emails == ["a@b.com"]
    assert findings.phones == ["555-123-4567"]
    assert findings.social_media == ["linkedin.com/in/janedoe"]
    assert findings.addresses == []
    assert findings.to_wire()["socialMedia"] == ["linkedin.com/in/janedoe"]


def test_phone_formats_collapse_by_digits():
    findings = detect_pii("Call 555-123-4567 or (555) 123-4567 or 555.123.4567")
    assert findings.phones == ["555-123-4567"]


def test_international_phone_kept_whole():
    findings = detect_pii("Phone: +44 20 7946 0958")
    assert findings.phones == ["+44 20 7946 0958"]


def test_emails_deduplicated_case_insensitively():
    findings = detect_pii("Jane.Doe@Example.com, jane.doe@example.com; other@test.org")
    assert findings.emails == ["Jane.Doe@Example.com", "other@test.org"]


def test_street_and_city_state_zip_addresses():
    findings = detect_pii("Lives at 123 Main Street, Springfield, IL 62704")
    assert findings.addresses == ["123 Main Street", "Springfield, IL 62704"]


def test_po_box():
    assert detect_pii("Mail: PO Box 1234").addresses == ["PO Box 1234"]


def test_social_links_and_labeled_portfolio():
    text = "https://www.github.com/janedoe | github.com/janedoe/ | Portfolio: janedoe.dev"
    findings = detect_pii(text)
    assert findings.social_media == ["https://www.github.com/janedoe", "janedoe.dev"]


def test_email_domain_is_not_a_social_link():
    findings = detect_pii("contact: jane@github.com")
    assert findings.emails == ["jane@github.com"]
    assert findings.social_media == []


def test_empty_text_has_no_findings():
    findings = detect_pii("")
    assert findings.categories_found == []
    assert findings.emails == findings.phones == findings.addresses == findings.social_media == []
