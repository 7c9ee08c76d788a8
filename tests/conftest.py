import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import app as app_module
import config
from matching.llm_groq import LLMError
from models import Base, Candidate, Job
from schemas import ExtractedCandidate, MatchResult

JANE_RESUME = """Jane Smith
jane.smith@example.com | (555) 123-4567

SUMMARY
Backend engineer building APIs.

SKILLS
• Python, Django
• PostgreSQL
• Docker

EXPERIENCE
Software Engineer at Acme Corp | Jan 2020 - Present
- Built REST APIs

EDUCATION
B.S. Computer Science, State University, 2015 - 2019
"""

JOHN_RESUME = """John Doe
john.doe@example.com
Skills
• Java
• Kubernetes
"""


class FakeLLM:
    """Stands in for GroqClient; records calls and returns canned results."""

    def __init__(self, candidate=None, match=None, error=None):
        self.candidate = candidate
        self.match = match
        self.error = error
        self.calls = []

    def extract_candidate(self, resume_text):
        self.calls.append(("extract", resume_text))
        if self.error:
            raise self.error
        return self.candidate

    def score_match(self, candidate_skills, job_title, job_skills):
        self.calls.append(("score", job_title))
        if self.error:
            raise self.error
        return self.match


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        future=True,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, future=True)


@pytest.fixture
def add_candidate(session_factory):
    def _add(name, email, skills):
        with session_factory() as s:
            c = Candidate(name=name, email=email, skills=skills)
            s.add(c)
            s.commit()
            return c.id
    return _add


@pytest.fixture
def add_job(session_factory):
    def _add(title, required_skills, is_active=True):
        with session_factory() as s:
            j = Job(title=title, required_skills=required_skills, is_active=is_active)
            s.add(j)
            s.commit()
            return j.id
    return _add


@pytest.fixture
def llm_override():
    """Install a fake LLM client for the API routes."""
    def _set(client):
        app_module.app.dependency_overrides[app_module.get_llm_client] = lambda: client
    return _set


@pytest.fixture
def api(engine, tmp_path, monkeypatch, llm_override):
    app_module.Session.configure(bind=engine)
    monkeypatch.setattr(config, "RESUME_DIR", str(tmp_path / "resumes"))
    llm_override(None)
    # no context manager: the lifespan (real database, real LLM client) stays off
    yield TestClient(app_module.app)
    app_module.app.dependency_overrides.clear()


@pytest.fixture
def llm_candidate():
    return ExtractedCandidate(
        name="Jane Smith",
        email="jane.smith@example.com",
        phone="555-123-4567",
        skills=["Python", "FastAPI"],
    )


@pytest.fixture
def llm_error():
    return LLMError("Groq request failed: timeout")


@pytest.fixture
def llm_match():
    return MatchResult(score=88, explanation="Deep Python background.")
