from fastapi import APIRouter, Request

from ..api_meta import APP_NAME, APP_VERSION

router = APIRouter()


@router.get("/health")
def health(request: Request):
    report = getattr(request.app.state, "ingest_report", None)
    return {
        "status": "ok",
        "store_ready": getattr(request.app.state, "store", None) is not None,
        "group_id": request.app.state.group_id,
        "ingested_rows": report.written if report is not None else None,
    }


@router.get("/version")
def version():
    return {"app": APP_NAME, "version": APP_VERSION}
