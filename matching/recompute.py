"""
Persisted match scores.

A candidate's match list is always rebuilt wholesale against the current
set of active jobs. Each candidate is written in its own transaction and
guarded by the ORM version counter on ``Candidate``, so a concurrent
recompute or upload cannot silently lose a write.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from matching.llm_groq import GroqClient, LLMError
from matching.scorer import score_match
from models import Candidate, Job, RoleMatchScore
from schemas import RecomputeReport, ScoredMatch

logger = logging.getLogger(__name__)

# Attempts per candidate before a version conflict is reported
MAX_ATTEMPTS = 2


@dataclass(frozen=True)
class JobSkills:
    """Detached snapshot of the job fields scoring needs."""
    id: int
    title: str
    required_skills: List[str] = field(default_factory=list)

    @classmethod
    def from_job(cls, job: Job) -> "JobSkills":
        return cls(id=job.id, title=job.title, required_skills=list(job.required_skills or []))


def score_candidate(candidate_skills: List[str], job, client: Optional[GroqClient] = None) -> ScoredMatch:
    """Score one (candidate, job) pair, falling back to skill overlap if the LLM fails."""
    job_skills = job.required_skills or []
    # empty lists have a fixed answer, no need to ask the model
    if client is not None and candidate_skills and job_skills:
        try:
            result = client.score_match(candidate_skills, job.title, job_skills)
            return ScoredMatch(source="llm", score=result.score, explanation=result.explanation)
        except LLMError as e:
            logger.warning(f"LLM scoring failed for job {job.id}, using skill overlap: {e}")

    result = score_match(candidate_skills, job_skills)
    return ScoredMatch(source="heuristic", score=result.score, explanation=result.explanation)


def score_against_jobs(candidate: Candidate, jobs, client: Optional[GroqClient] = None) -> List[RoleMatchScore]:
    scores = []
    for job in jobs:
        scored = score_candidate(candidate.skills or [], job, client)
        scores.append(RoleMatchScore(
            job_id=job.id,
            score=scored.score,
            explanation=scored.explanation,
            source=scored.source,
        ))
    return scores


def replace_matches(candidate: Candidate, jobs, client: Optional[GroqClient] = None) -> None:
    candidate.match_scores = score_against_jobs(candidate, jobs, client)
    # touching the row makes the flush run the version check
    candidate.matches_updated_at = datetime.now()


def active_jobs(session: Session) -> List[JobSkills]:
    jobs = session.scalars(select(Job).where(Job.is_active.is_(True)).order_by(Job.id)).all()
    return [JobSkills.from_job(j) for j in jobs]


def _drop_deleted_jobs(s: Session, candidate: Candidate) -> None:
    job_ids = {m.job_id for m in candidate.match_scores}
    if not job_ids:
        return
    with s.no_autoflush:
        existing = set(s.scalars(select(Job.id).where(Job.id.in_(job_ids))))
    if existing != job_ids:
        candidate.match_scores = [m for m in candidate.match_scores if m.job_id in existing]


def _recompute_one(session_factory, candidate_id: int, client: Optional[GroqClient]) -> bool:
    """Rebuild one candidate's matches. False if every attempt hit a version conflict."""
    for attempt in range(1, MAX_ATTEMPTS + 1):
        with session_factory() as s:
            candidate = s.get(Candidate, candidate_id)
            if candidate is None:
                # deleted since the id list was read
                return True
            # jobs can be edited or deleted while the pass runs
            replace_matches(candidate, active_jobs(s), client)
            # a job deleted while the LLM was scoring must not come back
            _drop_deleted_jobs(s, candidate)
            try:
                s.commit()
                return True
            except StaleDataError:
                s.rollback()
                logger.warning(
                    f"Candidate {candidate_id} was modified concurrently "
                    f"(attempt {attempt}/{MAX_ATTEMPTS})"
                )
    return False


def recompute_all_matches(session_factory, client: Optional[GroqClient] = None,
                          after_id: Optional[int] = None,
                          should_cancel: Optional[Callable[[], bool]] = None) -> RecomputeReport:
    """
    Rebuild the match list of every candidate against all active jobs.

    Args:
        session_factory: sessionmaker bound to the database
        client: optional LLM client; skill overlap is used when absent or failing
        after_id: checkpoint from a previous report; candidates with id <= after_id are skipped
        should_cancel: polled before each candidate; returning True stops the pass

    Returns:
        RecomputeReport whose last_candidate_id can be passed back as after_id
    """
    with session_factory() as s:
        jobs = active_jobs(s)
        query = select(Candidate.id).order_by(Candidate.id)
        if after_id is not None:
            query = query.where(Candidate.id > after_id)
        candidate_ids = s.scalars(query).all()

    logger.info(f"Recomputing matches: {len(candidate_ids)} candidates against {len(jobs)} jobs")
    report = RecomputeReport(job_count=len(jobs), last_candidate_id=after_id)

    for candidate_id in candidate_ids:
        if should_cancel is not None and should_cancel():
            report.cancelled = True
            logger.info(f"Recompute cancelled after candidate {report.last_candidate_id}")
            break
        if not _recompute_one(session_factory, candidate_id, client):
            report.conflicts += 1
        report.processed += 1
        report.last_candidate_id = candidate_id

    logger.info(
        f"Recompute finished: processed={report.processed} conflicts={report.conflicts} "
        f"cancelled={report.cancelled}"
    )
    return report


def prune_job_matches(session: Session, job_id: int) -> int:
    """Remove every stored match that references job_id. Returns the number removed."""
    result = session.execute(delete(RoleMatchScore).where(RoleMatchScore.job_id == job_id))
    return result.rowcount or 0
