import logging

from resume_insight_ai.utils.logger import get_logger


def test_repeated_calls_share_one_handler():
    first = get_logger("resume_insight_ai.tests.shared")
    second = get_logger("resume_insight_ai.tests.shared")
    assert first is second
    assert len(first.handlers) == 1
    assert get_logger("resume_insight_ai.tests.other").handlers == first.handlers


def test_level_override_and_propagation(caplog):
    log = get_logger("resume_insight_ai.tests.quiet", level=logging.ERROR)
    assert log.level == logging.ERROR
    assert log.propagate
    with caplog.at_level(logging.DEBUG):
        log.warning("dropped")
        log.error("kept")
    messages = [r.getMessage() for r in caplog.records if r.name == "resume_insight_ai.tests.quiet"]
    assert messages == ["kept"]
