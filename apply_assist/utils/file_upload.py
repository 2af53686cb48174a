"""
File Upload Utility - Extract text from resume files.

Supported formats:
- PDF (.pdf) using PyPDF2
- Word (.docx) using python-docx
- Plain Text (.txt)

Files arrive either as multipart uploads or as base64 strings inside a
JSON body (the browser extension). Max file size: 5MB
"""

import base64
import binascii
import io
import zipfile
from typing import Optional, Tuple

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from fastapi import UploadFile, HTTPException
from PyPDF2 import PdfReader
from PyPDF2.errors import PyPdfError


MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
ALLOWED_EXTENSIONS = {'.pdf', '.docx', '.txt'}
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if not filename or '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def _check_size(content: bytes) -> None:
    if len(content) > MAX_FILE_SIZE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {MAX_FILE_SIZE_MB}MB"
        )


def extract_text(content: bytes, ext: str) -> str:
    """Extract text based on extension (.pdf, .docx, anything else as text)."""
    if ext == '.pdf':
        text = extract_from_pdf(content)
    elif ext == '.docx':
        text = extract_from_docx(content)
    else:
        text = extract_from_txt(content)

    if not text.strip():
        raise HTTPException(
            status_code=400,
            detail="Could not extract text from file. File may be empty or corrupted."
        )
    return text


async def extract_text_from_file(file: UploadFile) -> Tuple[str, str]:
    """
    Extract text from uploaded file.

    Args:
        file: FastAPI UploadFile

    Returns:
        Tuple of (extracted_text, filename)

    Raises:
        HTTPException on validation/extraction errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PDF, DOCX, TXT"
        )

    content = await file.read()
    _check_size(content)
    return extract_text(content, ext), file.filename


def _extension_for(file_name: Optional[str], file_type: str) -> str:
    ext = get_file_extension(file_name or '')
    if ext in ALLOWED_EXTENSIONS:
        return ext
    file_type = (file_type or '').lower()
    if 'pdf' in file_type:
        return '.pdf'
    if file_type == DOCX_MIME or 'wordprocessingml' in file_type:
        return '.docx'
    return '.txt'


def decode_base64_content(content: str, file_name: Optional[str] = None, file_type: str = "text/plain") -> str:
    """
    Turn a base64 payload from the extension into resume text.

    The extension extracts PDF text client-side, so a PDF payload that is
    not base64-encoded PDF bytes is taken as already-extracted text.
    """
    if not content:
        raise HTTPException(status_code=400, detail="No file content provided")

    ext = _extension_for(file_name, file_type)

    try:
        raw = base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError):
        if ext == '.pdf':
            return content
        raise HTTPException(status_code=400, detail="File content is not valid base64")

    _check_size(raw)
    if ext == '.pdf' and not raw.startswith(b'%PDF'):
        return content
    return extract_text(raw, ext)


def extract_from_pdf(content: bytes) -> str:
    """Extract text from PDF bytes."""
    try:
        reader = PdfReader(io.BytesIO(content))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        return '\n'.join(text_parts)
    except (PyPdfError, ValueError, OSError) as e:
        raise HTTPException(status_code=400, detail=f"Error reading PDF: {str(e)}")


def extract_from_docx(content: bytes) -> str:
    """Extract text from DOCX bytes."""
    try:
        doc = Document(io.BytesIO(content))
    except (PackageNotFoundError, zipfile.BadZipFile, ValueError, KeyError) as e:
        raise HTTPException(status_code=400, detail=f"Error reading DOCX: {str(e)}")

    text_parts = [para.text for para in doc.paragraphs if para.text.strip()]

    # Tables hold skills / education grids in many templates
    for table in doc.tables:
        for row in table.rows:
            row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if row_text:
                text_parts.append(' | '.join(row_text))

    return '\n'.join(text_parts)


def extract_from_txt(content: bytes) -> str:
    """Extract text from TXT bytes."""
    for encoding in ['utf-8', 'cp1252']:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    # latin-1 maps every byte
    return content.decode('latin-1')


def get_supported_formats() -> dict:
    """Get info about supported file formats."""
    return {
        "supported_formats": [
            {"extension": ".pdf", "available": True, "name": "PDF"},
            {"extension": ".docx", "available": True, "name": "Word Document"},
            {"extension": ".txt", "available": True, "name": "Plain Text"}
        ],
        "max_size_mb": MAX_FILE_SIZE_MB
    }
