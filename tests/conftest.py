import sys
from pathlib import Path
from typing import Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


SAMPLE_RESUME = """Jane Doe
Email: jane.doe@example.com | (555) 123-4567 | linkedin.com/in/janedoe

Summary
Backend engineer with eight years of experience building distributed systems.

Experience
Senior Engineer, Acme Corp (2019 - Present)
• Led migration of billing services to Python, cutting latency by 40%
• Mentored five engineers

Skills
Python, PostgreSQL, Kubernetes

Education
B.S. Computer Science, State University
"""


@pytest.fixture
def sample_resume() -> str:
    return SAMPLE_RESUME


class DummyGateway:
    """Stands in for LLMGateway: replies are looked up by the request's system prompt."""

    def __init__(self, replies: Dict[str, object], default: object = "") -> None:
        self.replies = replies
        self.default = default
        self.calls: List[List[Dict[str, str]]] = []

    async def complete(self, messages, temperature=0.1):
        self.calls.append(messages)
        reply = self.replies.get(messages[0]["content"], self.default)
        if callable(reply):
            reply = await reply()
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def dummy_gateway():
    return DummyGateway
