from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request, UploadFile

from chna_cra.features.ingest.service import IngestService
from chna_cra.features.pipeline.api import session_summary
from chna_cra.features.pipeline.service import run_pipeline

router = APIRouter(prefix="/session", tags=["ingest"])


@router.post("/documents")
async def upload_documents(request: Request, files: list[UploadFile]) -> dict[str, object]:
    if not files:
        raise HTTPException(status_code=400, detail="no_files")

    cfg = request.app.state.cfg
    result = await IngestService(supported_kinds=cfg.supported_kinds).process_uploads(files)
    if not result.documents:
        raise HTTPException(
            status_code=422,
            detail={"error": "no_supported_documents", "warnings": [asdict(w) for w in result.warnings]},
        )

    session = run_pipeline(result.documents, request.app.state.catalog, result.warnings)
    request.app.state.session = session
    return session_summary(session)
