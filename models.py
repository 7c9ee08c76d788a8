from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, TypeDecorator
from sqlalchemy.orm import declarative_base, relationship
import json

Base = declarative_base()


class JSONType(TypeDecorator):
    """Custom JSON type that works reliably with SQLite."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert Python object to JSON string for storage."""
        if value is None:
            return None
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        """Convert JSON string back to Python object."""
        if value is None:
            return None
        return json.loads(value)


class Candidate(Base):
    __tablename__ = "candidates"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    phone = Column(String, default="")
    raw_text = Column(Text)
    skills = Column(JSONType, default=list)
    experience = Column(JSONType, default=list)
    education = Column(JSONType, default=list)
    resume_path = Column(String, nullable=True)
    parse_source = Column(String, default="heuristic")  # "llm" or "heuristic"
    status = Column(String, default="new")
    created_at = Column(DateTime, default=datetime.now)
    matches_updated_at = Column(DateTime, nullable=True)
    # Bumped on every UPDATE; a stale write raises StaleDataError
    version = Column(Integer, nullable=False)

    match_scores = relationship(
        "RoleMatchScore",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="RoleMatchScore.job_id",
    )

    __mapper_args__ = {"version_id_col": version}


class Job(Base):
    __tablename__ = "jobs"
    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, default="")
    required_skills = Column(JSONType, default=list)
    preferred_skills = Column(JSONType, default=list)
    min_experience = Column(Integer, default=0)
    location = Column(String, nullable=True)
    employment_type = Column(String, default="Full-time")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)


class RoleMatchScore(Base):
    __tablename__ = "role_match_scores"
    id = Column(Integer, primary_key=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)
    # No FK: entries for deleted jobs are pruned explicitly
    job_id = Column(Integer, nullable=False, index=True)
    score = Column(Integer, nullable=False)
    explanation = Column(Text, default="")
    source = Column(String, default="heuristic")

    candidate = relationship("Candidate", back_populates="match_scores")
