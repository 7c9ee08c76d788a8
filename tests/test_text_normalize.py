from parsers.text_normalize import clean_fragment, non_blank_lines, normalize_resume_text, unique_in_order


def test_bullet_glyphs_become_canonical():
    assert normalize_resume_text("◦  Python\n▪Go\n‣ Rust\n⁃\tSQL") == "• Python\n• Go\n• Rust\n• SQL"


def test_leading_dashes_and_asterisks_become_bullets():
    text = "- Docker\n– Git\n— AWS\n  * Linux"
    assert normalize_resume_text(text) == "• Docker\n• Git\n• AWS\n• Linux"


def test_inline_dash_is_kept():
    assert normalize_resume_text("Jan 2020 - Present") == "Jan 2020 - Present"


def test_numbered_markers_get_one_space():
    assert normalize_resume_text("1.Python\n2.   Go") == "1. Python\n2. Go"


def test_decimal_is_not_a_numbered_marker():
    assert normalize_resume_text("2.5 years of Go") == "2.5 years of Go"


def test_whitespace_and_blank_lines_collapse():
    assert normalize_resume_text("a  \t b\n\n\n\nc\r\nd") == "a b\n\nc\nd"


def test_newlines_are_preserved():
    assert normalize_resume_text("a\nb\nc").count("\n") == 2


def test_empty_input():
    assert normalize_resume_text("") == ""


def test_clean_fragment_strips_brackets_and_punctuation():
    assert clean_fragment("  (React.js) ") == "React.js"
    assert clean_fragment("[SQL];") == "SQL"
    assert clean_fragment("...Node.js!") == "Node.js"
    assert clean_fragment("C++") == "C"


def test_unique_in_order_is_case_sensitive():
    assert unique_in_order(["React", "react", "React", "", "Go"]) == ["React", "react", "Go"]


def test_non_blank_lines():
    assert non_blank_lines("  a \n\n   \n b") == ["a", "b"]
