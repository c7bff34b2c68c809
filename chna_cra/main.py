from fastapi import FastAPI

from chna_cra.config import load_config
from chna_cra.features.ingest.api import router as ingest_router
from chna_cra.features.pipeline.api import router as session_router
from chna_cra.features.pipeline.session import PipelineSession
from chna_cra.features.projection.api import router as projection_router
from chna_cra.features.reference.catalog import load_reference_catalog
from chna_cra.logging_config import configure_logging
from chna_cra.web.health import router as health_router


def create_app() -> FastAPI:
    cfg = load_config()
    configure_logging(cfg.log_level)

    app = FastAPI(title="CHNA to CRA Engine", version="0.1.0")
    app.state.cfg = cfg
    app.state.catalog = load_reference_catalog(cfg.catalog_path)
    app.state.session = PipelineSession()
    app.include_router(health_router)
    app.include_router(ingest_router)
    app.include_router(session_router)
    app.include_router(projection_router)
    return app


app = create_app()
