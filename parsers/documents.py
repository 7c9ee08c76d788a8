import logging
from pathlib import Path

import docx
import fitz  # PyMuPDF
from PyPDF2 import PdfReader

logger = logging.getLogger(__name__)


class UnsupportedDocumentError(ValueError):
    """File extension is not one of the supported resume formats."""


class DocumentReadError(Exception):
    """The document could not be read or holds no text."""


def read_pdf(file_path: str) -> str:
    """Extract text from PDF using PyMuPDF primarily, fallback to PyPDF2."""
    text = ""

    # ---------- Attempt 1: PyMuPDF (best for modern PDFs) ----------
    try:
        with fitz.open(file_path) as doc:
            text = "\n".join(page.get_text("text") or "" for page in doc)
        if text.strip():
            logger.info(f"Extracted {len(text)} characters via PyMuPDF")
            return text
    except Exception as e:
        logger.warning(f"PyMuPDF extraction failed for {file_path}: {e}")

    # ---------- Attempt 2: PyPDF2 (fallback) ----------
    try:
        with open(file_path, "rb") as f:
            reader = PdfReader(f)
            text = "\n".join(page.extract_text() or "" for page in reader.pages)
        if text.strip():
            logger.info(f"Extracted {len(text)} characters via PyPDF2 fallback")
            return text
    except Exception as e:
        raise DocumentReadError(f"Unable to read PDF {Path(file_path).name}: {e}") from e

    return text


def read_docx(file_path: str) -> str:
    """Extract paragraph and table text from a Word document."""
    try:
        document = docx.Document(file_path)
    except Exception as e:
        raise DocumentReadError(f"Unable to read Word document {Path(file_path).name}: {e}") from e

    lines = [para.text for para in document.paragraphs]
    # Skills are often laid out in tables
    for table in document.tables:
        for row in table.rows:
            lines.append(" ".join(cell.text for cell in row.cells))
    return "\n".join(lines)


def read_txt(file_path: str) -> str:
    """Read text file with encoding detection"""
    for encoding in ("utf-8", "latin-1", "cp1252"):
        try:
            with open(file_path, "r", encoding=encoding) as f:
                return f.read()
        except UnicodeDecodeError:
            continue
    raise DocumentReadError("Unable to decode file with supported encodings")


READERS = {
    ".pdf": read_pdf,
    ".docx": read_docx,
    ".doc": read_docx,
    ".txt": read_txt,
}


def extract_text(file_path: str) -> str:
    """Extract text based on file extension"""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    reader = READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedDocumentError(f"Unsupported file format: {path.suffix or '(none)'}")

    text = reader(str(path))
    if not text.strip():
        raise DocumentReadError(f"No text could be extracted from {path.name}")
    return text
