"""
User endpoints: record creation and spreadsheet export.

Handlers are plain functions so that SQLite I/O runs in the worker threadpool
instead of on the event loop.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response

from utils.config import Settings
from utils.db import RecordStore
from utils.export import XLSX_MEDIA_TYPE, build_document
from utils.logging import get_logger
from utils.schemas import UserCreate

logger = get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post("")
def create_user(
    payload: Optional[UserCreate] = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Response:
    """Store a user record. Fields are accepted as sent; missing ones are stored as NULL."""
    payload = payload or UserCreate()
    logger.info(
        "Received request to add user",
        extra={"user_name": payload.name, "email": payload.email},
    )

    record_id = store.create_record(payload.name, payload.email)

    logger.info("User added to database", extra={"user_id": record_id})
    return Response(status_code=200)


@router.get("/export")
def export_users(
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Download every stored record as an XLSX workbook."""
    logger.info("Received request to export users to Excel")

    records = store.list_records()
    logger.info("Fetched users from database", extra={"rows": len(records)})

    content = build_document(records, sheet_title=settings.EXPORT_SHEET_NAME)

    logger.info(
        "Excel file written and sent to client",
        extra={"export_filename": settings.EXPORT_FILENAME, "bytes": len(content)},
    )
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={settings.EXPORT_FILENAME}"},
    )
