from fastapi import APIRouter
from fastapi.responses import JSONResponse
from aggregator.db.session import check_db

router = APIRouter(tags=["health"])

@router.get("/health")
async def health():
    db_ok = await check_db()
    return {"db": "ok" if db_ok else "down"}

@router.get("/", include_in_schema=False)
async def root():
    return JSONResponse(
        status_code=404,
        content={"error": "Nothing to see here. Visit /aggregated-data instead."},
    )
