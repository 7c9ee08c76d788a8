"""
Rule-based resume extraction used when the LLM parser is unavailable.

Everything here is a pure function over strings: no I/O, no shared state,
and no exceptions escape. Unrecoverable fields come back empty.
"""
import re
import logging
from typing import Dict, List, Optional

from parsers.text_normalize import (
    BULLET,
    clean_fragment,
    non_blank_lines,
    normalize_resume_text,
    unique_in_order,
)
from schemas import EducationEntry, ExperienceEntry, ExtractedCandidate

logger = logging.getLogger(__name__)

MIN_SKILL_LENGTH = 2
MAX_HEADING_WORDS = 4

# Non-blank lines searched for the candidate name
NAME_SCAN_LINES = {"body": 5, "document": 10}

# Reference vocabulary for resumes without a skills section (order matters)
SKILL_VOCABULARY = [
    # Programming Languages
    "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "PHP", "Ruby", "Go", "Swift", "Kotlin",
    "Rust", "Scala", "Perl", "Dart", "Elixir", "Clojure", "Haskell", "Erlang",
    # Frontend
    "React", "Angular", "Vue", "Svelte", "Next.js", "Nuxt.js", "Gatsby", "Redux", "MobX",
    "HTML", "CSS", "SASS", "LESS", "Tailwind CSS", "Bootstrap", "Material UI", "Styled Components",
    # Backend
    "Node.js", "Express", "NestJS", "Django", "Flask", "Spring", "Laravel", "Ruby on Rails",
    "ASP.NET", "FastAPI", "GraphQL", "REST API", "Microservices", "Serverless",
    # Databases
    "MongoDB", "MySQL", "PostgreSQL", "SQLite", "Oracle", "SQL Server", "Firebase", "Redis",
    "Elasticsearch", "DynamoDB", "Cassandra", "Neo4j", "Cosmos DB",
    # DevOps & Cloud
    "Docker", "Kubernetes", "AWS", "Azure", "Google Cloud", "CI/CD", "Jenkins", "GitHub Actions",
    "Terraform", "Ansible", "Nginx", "Apache", "Linux", "Bash", "Shell Scripting",
    # Mobile
    "React Native", "Flutter", "Android", "iOS", "Xamarin", "Ionic",
    # AI/ML
    "Machine Learning", "Deep Learning", "TensorFlow", "PyTorch", "Keras", "NLP", "Computer Vision",
    "Data Science", "Pandas", "NumPy", "Scikit-learn", "OpenCV",
    # Other
    "Git", "Agile", "Scrum", "JIRA", "TDD", "DDD", "Clean Architecture", "OOP", "Functional Programming",
    "Blockchain", "Web3", "Solidity", "Ethereum", "Cybersecurity", "Penetration Testing",
]

# ---------- Section headings ----------
_SKILL_KEYWORDS = (
    r"technical\s+skills?|core\s+competenc(?:y|ies)|skills?|technologies|"
    r"expertise|proficiencies|capabilities"
)
_TERMINATOR_KEYWORDS = r"experience|education|projects?|certifications?"
_EXPERIENCE_KEYWORDS = r"experience|employment|employment\s+history|work\s+history"
_OTHER_KEYWORDS = (
    r"summary|objective|profile|awards|achievements|interests|hobbies|"
    r"references|publications|activities|volunteering|languages"
)


def _heading(keywords: str):
    # whole-word keyword anywhere in a short label, any case
    return re.compile(rf"\b(?:{keywords})\b", re.IGNORECASE)


_SKILL_HEADING = _heading(_SKILL_KEYWORDS)
_TERMINATOR_HEADING = _heading(_TERMINATOR_KEYWORDS)
_EXPERIENCE_HEADING = _heading(_EXPERIENCE_KEYWORDS)
_EDUCATION_HEADING = _heading(r"education|academics?|qualifications?")
_ANY_HEADING = _heading(
    "|".join([_SKILL_KEYWORDS, _TERMINATOR_KEYWORDS, _EXPERIENCE_KEYWORDS, _OTHER_KEYWORDS])
)

_NUMBERED = re.compile(r"^\d+\.(?!\d)\s*")
_TOKEN_SPLIT = re.compile(r"[,;|/]")

# ---------- Contact patterns ----------
_EMAIL = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_PHONE_PATTERNS = [
    # +1 (555) 123-4567 / 555-123-4567
    re.compile(r"(?<!\d)(?:\+\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}(?!\d)"),
    re.compile(r"\b\d{3}[\s.-]*\d{3}[\s.-]*\d{4}\b"),
    # +44 7911 123 456
    re.compile(r"\+\d{1,3}\s\d{3,4}\s\d{3,4}\s\d{3,4}"),
]
_NAME_EXCLUDE = ("resume", "cv", "curriculum")

# ---------- Education / experience patterns ----------
_DEGREE = re.compile(
    r"(?<![A-Za-z])(?:bachelor(?:'s)?|master(?:'s)?|ph\.?\s?d|doctorate|mba|mca|bca|diploma|"
    r"associate(?:'s)?\s+degree|b\.?\s?tech|m\.?\s?tech|b\.?\s?sc|m\.?\s?sc|"
    r"b\.\s?e\.|b\.\s?s\.|m\.\s?s\.|b\.\s?a\.|m\.\s?a\.)(?![A-Za-z])",
    re.IGNORECASE,
)
_INSTITUTION = re.compile(
    r"(?:[A-Z][A-Za-z&.'\-]*\s+)*?(?:University|Institute|College|School|Academy)"
    r"(?:\s+of\s+[A-Z][A-Za-z]*(?:\s+[A-Z][A-Za-z]*)*)?"
)
_YEAR = re.compile(r"\b(?:19|20)\d{2}\b")
_DEGREE_SPLIT = re.compile(r"\s*(?:[,|]|\s[-–—]\s)\s*")

_MONTH = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?"
_DATE = rf"(?:{_MONTH}\s+\d{{4}}|\d{{1,2}}/\d{{4}}|\d{{4}})"
_DATE_RANGE = re.compile(
    rf"{_DATE}\s*(?:-|–|—|to)\s*(?:{_DATE}|Present|Current|Now)", re.IGNORECASE
)
_ROLE_AT = re.compile(r"^(?P<title>.+?)\s+(?:at|@)\s+(?P<company>.+)$")
_ROLE_PATTERNS = [
    # Software Engineer at Acme Corp
    _ROLE_AT,
    # Software Engineer | Acme Corp
    re.compile(r"^(?P<title>[^|]+?)\s*\|\s*(?P<company>[^|]+?)(?:\s*\|.*)?$"),
    # Acme Corp — Software Engineer
    re.compile(r"^(?P<company>.+?)\s+[—–]\s+(?P<title>.+)$"),
]


# -------------------------------------------------------------------
# Skills
# -------------------------------------------------------------------
def _heading_label(line: str) -> Optional[str]:
    """Return the heading label of a line, or None if it cannot be a heading."""
    if line.startswith(BULLET) or _NUMBERED.match(line):
        return None
    label = line.split(":", 1)[0].strip()
    if not label or len(label.split()) > MAX_HEADING_WORDS:
        return None
    return label


def _is_heading(line: str, heading: re.Pattern) -> bool:
    label = _heading_label(line)
    return label is not None and bool(heading.search(label))


def find_skills_section(lines: List[str]) -> Optional[List[str]]:
    """
    Collect the lines between the first skills heading and the next
    terminator heading.

    Returns None when the text has no skills heading at all, and a
    (possibly empty) list otherwise. Scanning ends at the first terminator.
    """
    collected = None
    for line in lines:
        if collected is None:
            if _is_heading(line, _SKILL_HEADING):
                collected = []
                _, _, inline = line.partition(":")
                if inline.strip():
                    collected.append(inline.strip())
            continue
        if _is_heading(line, _TERMINATOR_HEADING):
            break
        collected.append(line)
    return collected


def _split_tokens(text: str) -> List[str]:
    return [clean_fragment(part) for part in _TOKEN_SPLIT.split(text)]


def line_tokens(line: str) -> List[str]:
    line = line.strip()
    if line.startswith(BULLET):
        return _split_tokens(line[len(BULLET):])
    numbered = _NUMBERED.match(line)
    if numbered:
        return _split_tokens(line[numbered.end():])
    if "," in line or ";" in line:
        return _split_tokens(line)
    if ":" not in line:
        return [clean_fragment(line)]
    # "Languages: ..." without a list separator is treated as a label
    return []


def vocabulary_skills(text: str) -> List[str]:
    lowered = text.lower()
    return [skill for skill in SKILL_VOCABULARY if skill.lower() in lowered]


def extract_skills(text: str) -> List[str]:
    """Skills from the skills section, or from the vocabulary when there is none."""
    if not isinstance(text, str) or not text.strip():
        return []

    lines = non_blank_lines(normalize_resume_text(text))
    section = find_skills_section(lines)
    if section is None:
        logger.debug("No skills heading found, scanning reference vocabulary")
        return vocabulary_skills(text)

    tokens = []
    for line in section:
        tokens.extend(line_tokens(line))
    return unique_in_order(t for t in tokens if len(t) >= MIN_SKILL_LENGTH)


# -------------------------------------------------------------------
# Contact info
# -------------------------------------------------------------------
def extract_name(text: str, max_lines: int = NAME_SCAN_LINES["document"]) -> str:
    for line in non_blank_lines(text)[:max_lines]:
        if len(line) <= 2 or "@" in line:
            continue
        if line[0] == "+" or line[0].isdigit():
            continue
        lowered = line.lower()
        if any(word in lowered for word in _NAME_EXCLUDE):
            continue
        return line
    return ""


def extract_email(text: str) -> str:
    match = _EMAIL.search(text)
    return match.group(0) if match else ""


def extract_phone(text: str) -> str:
    for pattern in _PHONE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return ""


# -------------------------------------------------------------------
# Education / experience
# -------------------------------------------------------------------
def _section_lines(lines: List[str], heading) -> Optional[List[str]]:
    start = next((i for i, line in enumerate(lines) if _is_heading(line, heading)), None)
    if start is None:
        return None
    section = []
    for line in lines[start + 1:]:
        if _is_heading(line, _ANY_HEADING):
            break
        section.append(line)
    return section


def extract_education(text: str) -> List[EducationEntry]:
    lines = non_blank_lines(normalize_resume_text(text))
    section = _section_lines(lines, _EDUCATION_HEADING)
    if section is None:
        section = lines

    entries = []
    seen = set()
    for i, line in enumerate(section):
        if not _DEGREE.search(line):
            continue
        body = line.lstrip(BULLET).strip()
        degree = next((p for p in _DEGREE_SPLIT.split(body) if _DEGREE.search(p)), body)
        key = degree.lower()
        if key in seen:
            continue
        seen.add(key)

        # institution and year often sit on the following line
        context = " ".join(section[i:i + 2])
        institution = _INSTITUTION.search(context)
        years = _YEAR.findall(context)
        if len(years) >= 2:
            year = f"{years[0]} - {years[-1]}"
        else:
            year = years[0] if years else ""
        entries.append(EducationEntry(
            degree=degree.strip(),
            institution=institution.group(0).strip() if institution else "",
            year=year,
        ))
    return entries


def _match_role(line: str) -> Optional[Dict[str, str]]:
    for pattern in _ROLE_PATTERNS:
        match = pattern.match(line)
        if not match:
            continue
        title = match.group("title").strip(" ,|·")
        company = match.group("company").strip(" ,|·")
        if 2 <= len(title) <= 80 and 2 <= len(company) <= 80:
            return {"job_title": title, "company": company}
    return None


def extract_experience(text: str) -> List[ExperienceEntry]:
    lines = non_blank_lines(normalize_resume_text(text))
    section = _section_lines(lines, _EXPERIENCE_HEADING)
    if not section:
        return []

    entries = []
    current = None
    for line in section:
        if line.startswith(BULLET):
            if current is not None:
                current["description"].append(line[len(BULLET):].strip())
            continue

        date_match = _DATE_RANGE.search(line)
        duration = date_match.group(0) if date_match else ""
        remainder = _DATE_RANGE.sub("", line).strip(" ,|·()")
        role = _match_role(remainder) if remainder else None

        # "Delhi | Remote · 07/2025 – 12/2025" dates the role above it
        if duration and current is not None and not current["duration"] and not _ROLE_AT.match(remainder):
            current["duration"] = duration
        elif role:
            current = {**role, "duration": duration, "description": []}
            entries.append(current)
        elif current is not None:
            current["description"].append(line)

    return [
        ExperienceEntry(
            job_title=e["job_title"],
            company=e["company"],
            duration=e["duration"],
            description="\n".join(e["description"]),
        )
        for e in entries
    ]


def extract_candidate(text: str, origin: str = "document") -> ExtractedCandidate:
    """
    Best-effort candidate from raw resume text.

    Args:
        text: plain text of the resume
        origin: "document" for text read from an uploaded file, "body" for
            text posted directly; controls how many lines are searched for
            the name

    Returns:
        ExtractedCandidate with empty defaults for anything not found
    """
    if not isinstance(text, str) or not text.strip():
        return ExtractedCandidate()

    max_lines = NAME_SCAN_LINES.get(origin, NAME_SCAN_LINES["document"])
    return ExtractedCandidate(
        name=extract_name(text, max_lines=max_lines),
        email=extract_email(text),
        phone=extract_phone(text),
        skills=extract_skills(text),
        experience=extract_experience(text),
        education=extract_education(text),
    )
