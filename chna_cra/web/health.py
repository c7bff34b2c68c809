from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    catalog = request.app.state.catalog
    return {"ok": True, "disparities": len(catalog.disparities), "opportunity_templates": len(catalog.opportunities)}
