import docx
import fitz
import pytest

from parsers.documents import DocumentReadError, UnsupportedDocumentError, extract_text


def test_txt_utf8(tmp_path):
    path = tmp_path / "resume.txt"
    path.write_text("Jane Smith\nSkills\n• Python", encoding="utf-8")
    assert extract_text(str(path)).startswith("Jane Smith")


def test_txt_latin1_fallback(tmp_path):
    path = tmp_path / "resume.txt"
    path.write_bytes("José Álvarez\n".encode("latin-1"))
    assert extract_text(str(path)) == "José Álvarez\n"


def test_docx_paragraphs_and_tables(tmp_path):
    path = tmp_path / "resume.docx"
    document = docx.Document()
    document.add_paragraph("Jane Smith")
    document.add_paragraph("Skills")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Python"
    table.rows[0].cells[1].text = "Docker"
    document.save(str(path))

    text = extract_text(str(path))
    assert "Jane Smith" in text
    assert "Python Docker" in text


def test_pdf(tmp_path):
    path = tmp_path / "resume.pdf"
    pdf = fitz.open()
    page = pdf.new_page()
    page.insert_text((72, 72), "Jane Smith")
    pdf.save(str(path))
    pdf.close()

    assert "Jane Smith" in extract_text(str(path))


def test_unsupported_extension(tmp_path):
    path = tmp_path / "resume.odt"
    path.write_text("Jane Smith")
    with pytest.raises(UnsupportedDocumentError):
        extract_text(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        extract_text(str(tmp_path / "nope.pdf"))


def test_empty_document(tmp_path):
    path = tmp_path / "resume.txt"
    path.write_text("  \n ")
    with pytest.raises(DocumentReadError):
        extract_text(str(path))


def test_corrupt_docx(tmp_path):
    path = tmp_path / "resume.docx"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(DocumentReadError):
        extract_text(str(path))
