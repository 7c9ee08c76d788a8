from __future__ import annotations
import logging
import math
import os
import re
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import Text, cast, create_engine, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

import config
from matching.llm_groq import GroqClient
from matching.recompute import active_jobs, prune_job_matches, recompute_all_matches, replace_matches
from models import Base, Candidate, Job, RoleMatchScore
from parsers.documents import DocumentReadError, UnsupportedDocumentError, extract_text
from parsers.extract import ResumeParser
from schemas import (
    CandidateOut,
    CandidatePage,
    JobIn,
    JobOut,
    JobUpdate,
    ParsedResume,
    ParseTextIn,
    RankedCandidate,
    RecomputeReport,
    StatusUpdate,
)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

engine = None
Session = sessionmaker(autoflush=False, future=True)
_llm_client: Optional[GroqClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: storage directories, database, LLM client."""
    global engine, _llm_client

    os.makedirs(config.BASE_DIR, exist_ok=True)
    os.makedirs(config.RESUME_DIR, exist_ok=True)

    logger.info(f"Using base directory: {config.BASE_DIR}")
    logger.info(f"Database URL: {config.DATABASE_URL}")
    connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}
    engine = create_engine(config.DATABASE_URL, future=True, connect_args=connect_args)
    Session.configure(bind=engine)

    # Ensure tables exist
    Base.metadata.create_all(engine)
    _llm_client = GroqClient.from_config()

    yield
    logger.info("Application shutting down.")


app = FastAPI(title="Resume Matcher", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_llm_client() -> Optional[GroqClient]:
    return _llm_client


def _safe_filename(prefix: str, original: str) -> str:
    base = re.sub(r"[^A-Za-z0-9._-]", "_", original)
    unique = uuid.uuid4().hex[:8]
    return f"{prefix}_{unique}_{base}"


def _discard_file(path: Optional[str]) -> None:
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove stored resume {path}: {e}")


def _recompute_in_background(client: Optional[GroqClient]) -> None:
    # runs after the response is sent; nobody is left to receive the error
    try:
        recompute_all_matches(Session, client)
    except Exception:
        logger.exception("Background match recompute failed")


def _clean_skills(skills: Optional[List[str]]) -> List[str]:
    return [s.strip() for s in (skills or []) if s and s.strip()]


def _job_errors(title: Optional[str], required_skills: Optional[List[str]]) -> dict:
    errors = {}
    if title is not None and not title.strip():
        errors["title"] = "Title is required"
    if required_skills is not None and not _clean_skills(required_skills):
        errors["required_skills"] = "At least one required skill is needed"
    return errors


def _get_or_404(s, model, obj_id: int, label: str):
    obj = s.get(model, obj_id)
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{label} {obj_id} not found.")
    return obj


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------
@app.get("/")
def root():
    return {"status": "ok", "message": "Resume Matcher API is running"}


@app.post("/candidates/upload", response_model=CandidateOut, status_code=201)
def upload_candidate(resume: UploadFile = File(...), client: Optional[GroqClient] = Depends(get_llm_client)):
    """Store a resume, parse it, and score it against every active job."""
    filename = resume.filename or ""
    extension = os.path.splitext(filename)[1].lower()
    if extension not in config.ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type. Please upload PDF, DOCX or TXT files only.",
        )

    # one byte past the limit is enough to know it is too large
    content = resume.file.read(config.MAX_UPLOAD_BYTES + 1)
    if len(content) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large (max 5MB)")
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    os.makedirs(config.RESUME_DIR, exist_ok=True)
    save_path = os.path.join(config.RESUME_DIR, _safe_filename("resume", filename))
    with open(save_path, "wb") as f:
        f.write(content)

    try:
        text = extract_text(save_path)
    except (UnsupportedDocumentError, DocumentReadError) as e:
        _discard_file(save_path)
        logger.warning(f"Rejected upload {filename}: {e}")
        raise HTTPException(
            status_code=400,
            detail=f"Error parsing resume. The file may be corrupted or in an unsupported format: {e}",
        )

    parsed = ResumeParser(client).parse_text(text, origin="document")
    data = parsed.candidate
    if not data.name or not data.email:
        _discard_file(save_path)
        logger.warning(f"Rejected upload {filename}: name or email missing ({parsed.source})")
        raise HTTPException(
            status_code=400,
            detail="Failed to extract required fields (name and email) from resume",
        )

    with Session() as s:
        existing = s.scalar(select(Candidate).where(Candidate.email == data.email))
        if existing is not None:
            _discard_file(save_path)
            raise HTTPException(
                status_code=400,
                detail={"message": "This candidate has already been uploaded", "candidate_id": existing.id},
            )

        candidate = Candidate(
            name=data.name,
            email=data.email,
            phone=data.phone,
            raw_text=text,
            skills=data.skills,
            experience=[e.model_dump() for e in data.experience],
            education=[e.model_dump() for e in data.education],
            resume_path=save_path,
            parse_source=parsed.source,
            status="new",
        )
        jobs = active_jobs(s)
        replace_matches(candidate, jobs, client)
        s.add(candidate)
        try:
            s.commit()
        except IntegrityError:
            s.rollback()
            _discard_file(save_path)
            raise HTTPException(status_code=400, detail="email already exists")

        s.refresh(candidate)
        logger.info(
            f"Candidate {candidate.id} saved ({parsed.source}, {len(data.skills)} skills, "
            f"{len(jobs)} jobs scored)"
        )
        return CandidateOut.model_validate(candidate)


@app.post("/candidates/parse-text", response_model=ParsedResume)
def parse_text(body: ParseTextIn, client: Optional[GroqClient] = Depends(get_llm_client)):
    """Parse pasted resume text without storing anything."""
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="text cannot be empty.")
    return ResumeParser(client).parse_text(body.text, origin="body")


@app.get("/candidates", response_model=CandidatePage)
def list_candidates(
    search: str = "",
    skill: str = "",
    min_score: Optional[int] = None,
    status: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    query = select(Candidate)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Candidate.name.ilike(pattern),
            Candidate.email.ilike(pattern),
            cast(Candidate.skills, Text).ilike(pattern),
        ))
    wanted = _clean_skills(skill.split(","))
    if wanted:
        query = query.where(or_(*(cast(Candidate.skills, Text).ilike(f"%{w}%") for w in wanted)))
    if min_score is not None:
        query = query.where(Candidate.match_scores.any(RoleMatchScore.score >= min_score))
    if status:
        query = query.where(Candidate.status == status)

    with Session() as s:
        total = s.scalar(select(func.count()).select_from(query.subquery()))
        rows = s.scalars(
            query.order_by(Candidate.created_at.desc(), Candidate.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()
        return CandidatePage(
            data=[CandidateOut.model_validate(c) for c in rows],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )


@app.get("/candidates/{candidate_id}", response_model=CandidateOut)
def get_candidate(candidate_id: int):
    with Session() as s:
        return CandidateOut.model_validate(_get_or_404(s, Candidate, candidate_id, "Candidate"))


@app.put("/candidates/{candidate_id}/status", response_model=CandidateOut)
def update_candidate_status(candidate_id: int, body: StatusUpdate):
    with Session() as s:
        candidate = _get_or_404(s, Candidate, candidate_id, "Candidate")
        candidate.status = body.status
        s.commit()
        s.refresh(candidate)
        return CandidateOut.model_validate(candidate)


@app.delete("/candidates/{candidate_id}")
def delete_candidate(candidate_id: int):
    with Session() as s:
        candidate = _get_or_404(s, Candidate, candidate_id, "Candidate")
        resume_path = candidate.resume_path
        s.delete(candidate)
        s.commit()
    _discard_file(resume_path)
    return {"message": "Candidate deleted successfully"}


@app.post("/jobs", response_model=JobOut, status_code=201)
def create_job(job: JobIn, background_tasks: BackgroundTasks,
               client: Optional[GroqClient] = Depends(get_llm_client)):
    """Create a job; every candidate is rescored once the response is sent."""
    errors = _job_errors(job.title, job.required_skills)
    if errors:
        raise HTTPException(status_code=400, detail={"message": "Validation failed", "errors": errors})

    with Session() as s:
        j = Job(
            title=job.title.strip(),
            description=job.description,
            required_skills=_clean_skills(job.required_skills),
            preferred_skills=_clean_skills(job.preferred_skills),
            min_experience=job.min_experience,
            location=job.location,
            employment_type=job.employment_type,
            is_active=job.is_active,
        )
        s.add(j)
        s.commit()
        s.refresh(j)
        logger.info(f"Job {j.id} created: {j.title}")
        out = JobOut.model_validate(j)

    background_tasks.add_task(_recompute_in_background, client)
    return out


@app.get("/jobs/list", response_model=list[dict])
def list_job_titles():
    """Return all job IDs and titles for dropdown display."""
    with Session() as s:
        jobs = s.scalars(select(Job).order_by(Job.id)).all()
        return [{"id": j.id, "title": j.title} for j in jobs]


@app.get("/jobs", response_model=List[JobOut])
def list_jobs(skill: str = "", is_active: Optional[bool] = None):
    query = select(Job)
    if skill:
        query = query.where(cast(Job.required_skills, Text).ilike(f"%{skill}%"))
    if is_active is not None:
        query = query.where(Job.is_active.is_(is_active))
    with Session() as s:
        jobs = s.scalars(query.order_by(Job.created_at.desc(), Job.id.desc())).all()
        return [JobOut.model_validate(j) for j in jobs]


@app.put("/jobs/{job_id}", response_model=JobOut)
def update_job(job_id: int, updates: JobUpdate, background_tasks: BackgroundTasks,
               client: Optional[GroqClient] = Depends(get_llm_client)):
    changes = updates.model_dump(exclude_unset=True)
    errors = _job_errors(changes.get("title"), changes.get("required_skills"))
    if errors:
        raise HTTPException(status_code=400, detail={"message": "Validation failed", "errors": errors})

    for key in ("required_skills", "preferred_skills"):
        if key in changes:
            changes[key] = _clean_skills(changes[key])

    with Session() as s:
        j = _get_or_404(s, Job, job_id, "Job")
        for key, value in changes.items():
            setattr(j, key, value)
        s.commit()
        s.refresh(j)
        out = JobOut.model_validate(j)

    background_tasks.add_task(_recompute_in_background, client)
    return out


@app.delete("/jobs/{job_id}")
def delete_job(job_id: int):
    with Session() as s:
        j = _get_or_404(s, Job, job_id, "Job")
        s.delete(j)
        pruned = prune_job_matches(s, job_id)
        s.commit()
    logger.info(f"Job {job_id} deleted, {pruned} match entries pruned")
    return {"message": "Job description deleted successfully", "pruned": pruned}


@app.post("/matches/recompute", response_model=RecomputeReport)
def recompute_matches(after_id: Optional[int] = None, client: Optional[GroqClient] = Depends(get_llm_client)):
    """Rescore every candidate; pass the returned last_candidate_id as after_id to resume."""
    return recompute_all_matches(Session, client, after_id=after_id)


@app.get("/match/{job_id}", response_model=List[RankedCandidate])
def match_candidates(job_id: int, top_k: int = 5):
    """Rank candidates for a job by their stored match score."""
    if top_k <= 0:
        raise HTTPException(status_code=400, detail="top_k must be > 0")

    with Session() as s:
        _get_or_404(s, Job, job_id, "Job")
        rows = s.execute(
            select(RoleMatchScore, Candidate)
            .join(Candidate, RoleMatchScore.candidate_id == Candidate.id)
            .where(RoleMatchScore.job_id == job_id)
            .order_by(RoleMatchScore.score.desc(), Candidate.id)
            .limit(top_k)
        ).all()
        return [
            RankedCandidate(
                candidate_id=c.id,
                candidate_name=c.name,
                score=m.score,
                explanation=m.explanation,
            )
            for m, c in rows
        ]
