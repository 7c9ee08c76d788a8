from typing import List, Tuple
import math

from schemas import MatchResult

MAX_LISTED_SKILLS = 3


def _clean(skills: List[str]) -> List[str]:
    return [s.strip() for s in (skills or []) if isinstance(s, str) and s.strip()]


def _overlaps(candidate_skill: str, required_skill: str) -> bool:
    # Bidirectional containment: "Java" also matches "JavaScript"
    c, r = candidate_skill.lower(), required_skill.lower()
    return c in r or r in c


def skill_overlap(candidate_skills: List[str], job_skills: List[str]) -> Tuple[List[str], List[str]]:
    """Split the job's skills into (matched, missing), keeping job order."""
    c_skills = _clean(candidate_skills)
    matched, missing = [], []
    for required in _clean(job_skills):
        if any(_overlaps(c, required) for c in c_skills):
            matched.append(required)
        else:
            missing.append(required)
    return matched, missing


def calculate_match_score(candidate_skills: List[str], job_skills: List[str]) -> int:
    required = _clean(job_skills)
    if not required or not _clean(candidate_skills):
        return 0
    matched, _ = skill_overlap(candidate_skills, required)
    # half-up rounding, 12.5 -> 13
    score = math.floor(100 * len(matched) / len(required) + 0.5)
    return max(0, min(100, score))


def _listing(skills: List[str]) -> str:
    return ", ".join(skills[:MAX_LISTED_SKILLS]) or "None"


def generate_match_explanation(candidate_skills: List[str], job_skills: List[str]) -> str:
    if not _clean(job_skills):
        return "No job skills defined"
    if not _clean(candidate_skills):
        return "No candidate skills found"
    matched, missing = skill_overlap(candidate_skills, job_skills)
    return f"Strong in: {_listing(matched)}. Missing: {_listing(missing)}."


def score_match(candidate_skills: List[str], job_skills: List[str]) -> MatchResult:
    return MatchResult(
        score=calculate_match_score(candidate_skills, job_skills),
        explanation=generate_match_explanation(candidate_skills, job_skills),
    )
