import pytest

from parsers.basic_extract import (
    extract_candidate,
    extract_education,
    extract_email,
    extract_experience,
    extract_name,
    extract_phone,
    extract_skills,
    find_skills_section,
)
from schemas import EducationEntry, ExperienceEntry

from conftest import JANE_RESUME


# -------------------------------------------------------------------
# Skills section
# -------------------------------------------------------------------
def test_skills_stop_at_experience_heading():
    text = "Jane Smith\njane@example.com\nSKILLS\n• Python\n• Go\nEXPERIENCE\n- Senior Engineer\n"
    skills = extract_skills(text)
    assert skills == ["Python", "Go"]
    assert "Senior Engineer" not in skills


def test_case_variants_survive_exact_duplicates_collapse():
    text = "Skills\nReact\nreact\nReact\n"
    assert extract_skills(text) == ["React", "react"]


def test_comma_lines_split_and_colon_labels_drop():
    text = (
        "Technical Skills\n"
        "Languages: Python, Java\n"
        "Frameworks: Django\n"
        "Docker; Kubernetes | Helm\n"
        "Education\n"
        "BSc Physics\n"
    )
    # the label stays glued to the first fragment and a colon line without
    # a comma is lost entirely
    assert extract_skills(text) == ["Languages: Python", "Java", "Docker", "Kubernetes", "Helm"]


def test_numbered_and_slash_separated_items():
    text = "SKILLS\n1. Python/Flask\n2. [Redis]\n"
    assert extract_skills(text) == ["Python", "Flask", "Redis"]


def test_single_character_tokens_are_dropped():
    assert extract_skills("Skills\n• C, R, Go\n") == ["Go"]


def test_inline_header_content_is_collected():
    text = "Skills: Python, SQL\nProjects\nInventory app\n"
    assert extract_skills(text) == ["Python", "SQL"]


def test_scanning_stops_at_first_terminator():
    text = "Skills\n• Python\nExperience\n• Engineer\nTechnical Skills\n• Rust\n"
    assert extract_skills(text) == ["Python"]


def test_terminator_before_skills_heading_is_ignored():
    text = "Experience\nEngineer at Acme\nSkills\n• Go\n"
    assert extract_skills(text) == ["Go"]


def test_terminator_keyword_anywhere_in_short_line_ends_section():
    text = "Skills\n• Kafka\nExperience & Internships\nSenior Engineer\n"
    assert extract_skills(text) == ["Kafka"]


def test_short_plain_line_naming_a_section_ends_it():
    text = "Skills\nAgile\nProject Management\nScrum\n"
    assert extract_skills(text) == ["Agile"]


@pytest.mark.parametrize("heading", ["Skills & Tools", "Technical Skills Summary", "Core Skills:"])
def test_skills_heading_with_extra_words(heading):
    text = f"Jane\n{heading}\n• Kafka\n• Elm\n"
    assert extract_skills(text) == ["Kafka", "Elm"]


def test_long_line_mentioning_a_keyword_is_not_a_heading():
    text = "Skills\n• Go\nHands on experience with Go and Rust\nEducation\n"
    assert extract_skills(text) == ["Go", "Hands on experience with Go and Rust"]


def test_empty_skills_section_does_not_use_vocabulary():
    text = "Skills\nExperience\nPython developer at Acme\n"
    assert find_skills_section(["Skills", "Experience"]) == []
    assert extract_skills(text) == []


def test_vocabulary_fallback_without_skills_heading():
    text = "I build services with Python and Docker on AWS."
    assert extract_skills(text) == ["Python", "Docker", "AWS"]


def test_vocabulary_fallback_keeps_vocabulary_order():
    assert extract_skills("Docker first, then Python.") == ["Python", "Docker"]


def test_no_skills_section_returns_none():
    assert find_skills_section(["Jane Smith", "Summary"]) is None


@pytest.mark.parametrize("text", [
    JANE_RESUME,
    "Skills\n• a, b, cc\n• (x)\n",
    "SKILLS\n• ,,;;\n• Go\n",
    "nothing useful here",
    "",
])
def test_extract_skills_is_stable_and_has_no_short_entries(text):
    first = extract_skills(text)
    assert first == extract_skills(text)
    assert all(len(s) >= 2 for s in first)
    assert len(first) == len(set(first))


# -------------------------------------------------------------------
# Contact info
# -------------------------------------------------------------------
def test_name_is_first_plain_line():
    assert extract_name("John Doe\njohn@example.com\n") == "John Doe"


def test_name_skips_headers_contacts_and_numbers():
    text = "Resume\n+1 555 123 4567\n2020\nCV - Alex Kim\nAl\nAlex Kim\n"
    assert extract_name(text) == "Alex Kim"


def test_name_window_depends_on_origin():
    text = "RESUME\nCurriculum Vitae\nmail@x.io\n+44 20 7946 0958\n2024\nCV\nMaria Garcia\n"
    assert extract_name(text, max_lines=5) == ""
    assert extract_name(text, max_lines=10) == "Maria Garcia"
    assert extract_candidate(text, origin="body").name == ""
    assert extract_candidate(text, origin="document").name == "Maria Garcia"


def test_email():
    assert extract_email("Contact: jane.doe+jobs@mail.example.co.uk or call") == "jane.doe+jobs@mail.example.co.uk"
    assert extract_email("no address here") == ""


@pytest.mark.parametrize("text, expected", [
    ("Phone: (555) 123-4567", "(555) 123-4567"),
    ("Phone: +1 (555) 123-4567", "+1 (555) 123-4567"),
    ("Phone: 555.123.4567", "555.123.4567"),
    ("Phone: +44 7911 123 456", "+44 7911 123 456"),
    ("Phone: +44 7911 123 4567", "+44 7911 123 4567"),
    ("Phone: none", ""),
])
def test_phone_patterns(text, expected):
    assert extract_phone(text) == expected


def test_phone_pattern_order_wins_over_position():
    text = "Mobile: +44 7911 123 456\nOffice: 555-123-4567"
    assert extract_phone(text) == "555-123-4567"


# -------------------------------------------------------------------
# Education / experience
# -------------------------------------------------------------------
def test_education_entry():
    text = "EDUCATION\nB.S. Computer Science, Stanford University, 2014 - 2018\n"
    assert extract_education(text) == [
        EducationEntry(degree="B.S. Computer Science", institution="Stanford University", year="2014 - 2018"),
    ]


def test_experience_entries():
    text = (
        "EXPERIENCE\n"
        "Senior Engineer at Acme Corp | Jan 2020 - Present\n"
        "- Built APIs\n"
        "- Led team\n"
        "Acme Labs — Intern\n"
        "06/2018 – 08/2018\n"
        "EDUCATION\n"
        "BSc\n"
    )
    assert extract_experience(text) == [
        ExperienceEntry(
            job_title="Senior Engineer",
            company="Acme Corp",
            duration="Jan 2020 - Present",
            description="Built APIs\nLed team",
        ),
        ExperienceEntry(job_title="Intern", company="Acme Labs", duration="06/2018 – 08/2018"),
    ]


def test_no_experience_section():
    assert extract_experience("Jane Smith\nSkills\n• Go") == []


# -------------------------------------------------------------------
# Whole candidate
# -------------------------------------------------------------------
def test_extract_candidate_from_full_resume():
    candidate = extract_candidate(JANE_RESUME)
    assert candidate.name == "Jane Smith"
    assert candidate.email == "jane.smith@example.com"
    assert candidate.phone == "(555) 123-4567"
    assert candidate.skills == ["Python", "Django", "PostgreSQL", "Docker"]
    assert candidate.experience[0].company == "Acme Corp"
    assert candidate.education[0].institution == "State University"


@pytest.mark.parametrize("text", [None, 12345, "", "   \n  "])
def test_extract_candidate_never_raises(text):
    candidate = extract_candidate(text)
    assert candidate.name == ""
    assert candidate.skills == []
    assert candidate.experience == []
