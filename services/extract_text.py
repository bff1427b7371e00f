import io
import logging

from docx import Document
from pypdf import PdfReader

LOGGER = logging.getLogger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC = "application/msword"
TEXT = "text/plain"
ALLOWED_TYPES = (PDF, DOCX, DOC, TEXT)


class UnsupportedFileType(ValueError):
    pass


def from_pdf(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        return '\n'.join((page.extract_text() or '') for page in reader.pages)
    except Exception as e:
        LOGGER.warning("Failed to extract text from PDF: %s", e)
        return ''


def from_docx(data: bytes) -> str:
    try:
        doc = Document(io.BytesIO(data))
        return '\n'.join(p.text for p in doc.paragraphs)
    except Exception as e:
        LOGGER.warning("Failed to extract text from DOCX: %s", e)
        return ''


def from_upload(filename: str, mimetype: str, data: bytes) -> str:
    mimetype = (mimetype or '').lower()
    name = (filename or '').lower()
    if mimetype == PDF or name.endswith('.pdf'):
        return from_pdf(data)
    if 'word' in mimetype or name.endswith('.docx'):
        return from_docx(data)
    if mimetype == TEXT or name.endswith('.txt'):
        return data.decode('utf-8', errors='ignore')
    raise UnsupportedFileType(mimetype or name)
