"""Meter reading upload routes."""

import asyncio
import logging
import threading

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from starlette.concurrency import run_in_threadpool

from app.api.dependencies import get_upload_service
from app.core.config import settings
from app.schemas.meter_reading_upload import MeterReadingUploadResult
from app.services.exceptions import UploadCanceledError
from app.services.meter_reading_upload import MeterReadingUploadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meter-reading-uploads", tags=["meter-reading-uploads"])

HTTP_499_CLIENT_CLOSED_REQUEST = 499


@router.post("", response_model=MeterReadingUploadResult)
async def upload_meter_readings(
    request: Request,
    file: UploadFile | None = File(default=None),
    service: MeterReadingUploadService = Depends(get_upload_service),
) -> MeterReadingUploadResult:
    """
    Upload a CSV file of meter readings.

    Every row is validated on its own; the response lists the saved and
    failed counts with one error per rejected row.
    """
    if file is None or not file.filename or file.size == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide a file to upload.",
        )
    if not _is_csv(file):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Please upload a valid CSV file (.csv).",
        )

    logger.info("Received file [%s].", file.filename)
    cancel_event = threading.Event()
    watcher = asyncio.create_task(_cancel_on_disconnect(request, cancel_event))
    try:
        result = await run_in_threadpool(
            service.process_upload, file.file, file.filename, cancel_event
        )
    except UploadCanceledError:
        logger.warning("Upload for [%s] was canceled.", file.filename)
        raise HTTPException(
            status_code=HTTP_499_CLIENT_CLOSED_REQUEST,
            detail="Upload operation was canceled.",
        )
    except Exception as exc:
        logger.exception("Unexpected error processing file [%s].", file.filename)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An unexpected error occurred: {exc}",
        ) from exc
    finally:
        watcher.cancel()

    logger.info(
        "[%s] uploaded. Success: %s, Failed: %s",
        file.filename,
        result.saved_count,
        result.failed_count,
    )
    return result


def _is_csv(file: UploadFile) -> bool:
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    return (
        file.filename.lower().endswith(".csv")
        and content_type in settings.ACCEPTED_UPLOAD_CONTENT_TYPES
    )


async def _cancel_on_disconnect(request: Request, cancel_event: threading.Event) -> None:
    """Set the cancel event once the client goes away."""
    while not cancel_event.is_set():
        if await request.is_disconnected():
            cancel_event.set()
            return
        await asyncio.sleep(settings.DISCONNECT_POLL_INTERVAL_SECONDS)
