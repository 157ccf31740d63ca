"""
File Upload Utility - read uploads and extract resume text.

Supported resume formats:
- PDF (.pdf) using PyPDF2
- Word (.docx) using python-docx
- Plain Text (.txt)

Max file size comes from settings.max_upload_mb.
"""

import io
import os
import zipfile
from typing import Tuple

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from fastapi import UploadFile, HTTPException
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from weinds.core.config import get_settings

RESUME_EXTENSIONS = {'.pdf', '.docx', '.txt'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def clean_filename(filename: str) -> str:
    """Strip directories from a client-supplied file name."""
    name = os.path.basename(filename.replace("\\", "/")).strip()
    if not name or name in (".", ".."):
        raise HTTPException(status_code=400, detail="Invalid filename")
    return name


async def read_upload(file: UploadFile) -> Tuple[bytes, str]:
    """
    Read an upload, enforcing the size limit.

    Returns:
        Tuple of (content, cleaned filename)
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    max_mb = get_settings().max_upload_mb
    content = await file.read()
    if len(content) > max_mb * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File too large. Maximum size: {max_mb}MB")
    if not content:
        raise HTTPException(status_code=400, detail="File is empty")
    return content, clean_filename(file.filename)


async def extract_text_from_file(file: UploadFile) -> Tuple[str, str]:
    """
    Extract text from an uploaded resume.

    Returns:
        Tuple of (extracted_text, filename)

    Raises:
        HTTPException on validation/extraction errors
    """
    if file.filename:
        ext = get_file_extension(file.filename)
        if ext not in RESUME_EXTENSIONS:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported file type '{ext}'. Allowed: PDF, DOCX, TXT"
            )

    content, filename = await read_upload(file)
    ext = get_file_extension(filename)

    if ext == '.pdf':
        text = extract_from_pdf(content)
    elif ext == '.docx':
        text = extract_from_docx(content)
    else:  # .txt
        text = extract_from_txt(content)

    if not text.strip():
        raise HTTPException(
            status_code=400,
            detail="Could not extract text from file. File may be empty or corrupted."
        )

    return text, filename


def extract_from_pdf(content: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(content))
        return '\n'.join(page.extract_text() or '' for page in reader.pages)
    except (PdfReadError, ValueError, KeyError, TypeError) as e:
        raise HTTPException(status_code=400, detail=f"Error reading PDF: {e}")


def extract_from_docx(content: bytes) -> str:
    """Paragraphs, then table rows joined with ' | '."""
    try:
        doc = Document(io.BytesIO(content))
    except (zipfile.BadZipFile, PackageNotFoundError, ValueError, KeyError) as e:
        raise HTTPException(status_code=400, detail=f"Error reading DOCX: {e}")

    text_parts = [para.text for para in doc.paragraphs if para.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if row_text:
                text_parts.append(' | '.join(row_text))
    return '\n'.join(text_parts)


def extract_from_txt(content: bytes) -> str:
    for encoding in ['utf-8', 'cp1252']:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode('latin-1')
