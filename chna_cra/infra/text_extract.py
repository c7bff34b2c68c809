from dataclasses import dataclass
from pathlib import PurePath

import fitz  # PyMuPDF

from chna_cra.domain.enums import SourceKind


class ExtractionError(Exception):
    """The source could not be turned into page text."""


class UnsupportedKindError(ExtractionError):
    pass


@dataclass(frozen=True)
class ExtractedText:
    page_count: int
    page_texts: tuple[str, ...]


def kind_from_filename(filename: str) -> SourceKind:
    suffix = PurePath(filename or "").suffix.lower().lstrip(".")
    try:
        return SourceKind(suffix)
    except ValueError:
        raise UnsupportedKindError(f"unsupported file type: {filename!r}")


def _pdf_pages(data: bytes) -> list[str]:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise ExtractionError(f"unreadable pdf: {e}") from e

    try:
        if doc.needs_pass:
            raise ExtractionError("encrypted pdf")
        pages: list[str] = []
        for i in range(doc.page_count):
            page = doc.load_page(i)
            text = page.get_text("text") or ""
            pages.append(" ".join(text.split()))
        return pages
    except (RuntimeError, ValueError) as e:
        raise ExtractionError(f"unreadable pdf page: {e}") from e
    finally:
        doc.close()


def _txt_pages(data: bytes) -> list[str]:
    text = data.decode("utf-8", errors="replace")
    # Plain text has no pagination: one page, whitespace collapsed.
    return [" ".join(text.split())]


def extract_pages(data: bytes, kind: SourceKind) -> ExtractedText:
    if kind == SourceKind.pdf:
        pages = _pdf_pages(data)
    elif kind == SourceKind.txt:
        pages = _txt_pages(data)
    else:
        raise UnsupportedKindError(f"unsupported kind: {kind}")
    return ExtractedText(page_count=len(pages), page_texts=tuple(pages))
