"""Document text extraction for uploaded resumes and job descriptions."""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import PurePath

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt", ".md")


class DocumentFormatError(ValueError):
    """The document could not be turned into text."""


def file_extension(filename: str) -> str:
    return PurePath(filename).suffix.lower()


def is_supported(filename: str) -> bool:
    return file_extension(filename) in SUPPORTED_EXTENSIONS


class DocumentTextExtractor:
    """Turn raw document bytes into plain text, dispatching on file extension."""

    async def extract(self, data: bytes, filename: str) -> str:
        suffix = file_extension(filename)
        if suffix not in SUPPORTED_EXTENSIONS:
            supported = ", ".join(SUPPORTED_EXTENSIONS)
            raise DocumentFormatError(f"Unsupported file format: {suffix or filename}. Supported: {supported}")

        try:
            if suffix == ".pdf":
                text = await asyncio.to_thread(self._parse_pdf, data)
            elif suffix == ".docx":
                text = await asyncio.to_thread(self._parse_docx, data)
            else:
                text = self._parse_text(data)
        except DocumentFormatError:
            raise
        except Exception as e:
            raise DocumentFormatError(f"Failed to parse document {filename}: {e}") from e

        logger.info(f"Parsed {filename}, extracted {len(text)} characters")
        return text

    def _parse_pdf(self, data: bytes) -> str:
        """Parse PDF bytes using PyMuPDF."""
        import fitz  # PyMuPDF

        with fitz.open(stream=data, filetype="pdf") as doc:
            return "\n".join(page.get_text() for page in doc)

    def _parse_docx(self, data: bytes) -> str:
        """Parse DOCX bytes using python-docx, including table cells."""
        from docx import Document

        doc = Document(io.BytesIO(data))
        text_parts = [para.text for para in doc.paragraphs if para.text.strip()]

        for table in doc.tables:
            for row in table.rows:
                row_text = "\t".join(cell.text.strip() for cell in row.cells if cell.text.strip())
                if row_text:
                    text_parts.append(row_text)

        return "\n".join(text_parts)

    def _parse_text(self, data: bytes) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentFormatError(f"Text document is not valid UTF-8: {e}") from e
