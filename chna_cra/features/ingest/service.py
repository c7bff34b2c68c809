import logging
from dataclasses import dataclass, field

from fastapi import UploadFile

from chna_cra.domain.enums import SourceKind
from chna_cra.domain.models import Document, ExtractionWarning
from chna_cra.infra.text_extract import ExtractionError, UnsupportedKindError, extract_pages, kind_from_filename

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    documents: list[Document] = field(default_factory=list)
    warnings: list[ExtractionWarning] = field(default_factory=list)


class IngestService:
    def __init__(self, *, supported_kinds: frozenset[SourceKind]) -> None:
        self._supported = supported_kinds

    async def process_uploads(self, files: list[UploadFile]) -> IngestResult:
        """Read and extract every file in order; a failed file becomes a warning."""

        result = IngestResult()
        for f in files:
            name = f.filename or "upload"
            try:
                kind = kind_from_filename(name)
                if kind not in self._supported:
                    raise UnsupportedKindError(f"unsupported file type: {name!r}")
            except UnsupportedKindError as e:
                logger.warning("Skipping %s: %s", name, e)
                result.warnings.append(ExtractionWarning(document=name, code="unsupported_kind", message=str(e)))
                continue

            data = await f.read()
            if not data:
                logger.warning("Skipping %s: empty file", name)
                result.warnings.append(ExtractionWarning(document=name, code="empty_file", message="File is empty"))
                continue

            try:
                extracted = extract_pages(data, kind)
            except ExtractionError as e:
                logger.warning("Extraction failed for %s: %s", name, e)
                result.warnings.append(ExtractionWarning(document=name, code="extraction_failed", message=str(e)))
                continue

            result.documents.append(Document(name=name, kind=kind, page_texts=extracted.page_texts))
            logger.info("Extracted %s (%s, %d pages)", name, kind.value, extracted.page_count)

        return result
