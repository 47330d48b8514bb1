"""Photo upload router.

Accepts one JPEG or PNG photo, turns it into a one-page A4 PDF and mails
it to the configured recipient.  Nothing is stored.
"""
import logging
import time
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from photomail.config import get_settings
from photomail.schemas.upload import UploadResponse
from photomail.services.mail_service import (
    MailConfigError,
    MailDeliveryError,
    build_message,
    build_transport,
)
from photomail.services.naming_service import resolve_filename, resolve_subject
from photomail.services.pdf_service import ImageDecodeError, image_bytes_to_pdf

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=UploadResponse)
async def upload_photo(
    photo: Optional[UploadFile] = File(None),
    subject: Optional[str] = Form(None),
    filename: Optional[str] = Form(None),
):
    """Convert an uploaded photo to PDF and send it by email.

    - ``photo`` is required; JPEG and PNG only.
    - ``subject`` and ``filename`` are optional and sanitized; the defaults
      are ``<YYYY-MM-DD>.pdf`` and ``PDF <filename>``.
    - Max file size is controlled by ``MAX_UPLOAD_SIZE_MB`` in config.
    """
    started = time.monotonic()
    settings = get_settings()

    # 1. A file must be present
    if photo is None or not photo.filename:
        logger.info("Upload rejected: no file")
        raise HTTPException(status_code=400, detail="No file uploaded (field 'photo').")

    # 2. Read file bytes and enforce size limit
    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    file_bytes = await photo.read()
    if len(file_bytes) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Photo too large (limit {settings.MAX_UPLOAD_SIZE_MB} MB).",
        )
    logger.info(
        "Upload received: size=%d declared_type=%s", len(file_bytes), photo.content_type
    )

    # 3. Image -> PDF (format is detected from the bytes)
    try:
        pdf_bytes = await run_in_threadpool(image_bytes_to_pdf, file_bytes)
    except ImageDecodeError as exc:
        logger.warning("Image decode failed: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc))

    pdf_name = resolve_filename(filename, settings.TIMEZONE)
    mail_subject = resolve_subject(subject, pdf_name)

    # 4. Send
    try:
        transport = build_transport(settings)
        message = build_message(settings, pdf_name, mail_subject, pdf_bytes)
        await run_in_threadpool(transport.send, message)
    except MailConfigError as exc:
        logger.error("Mail transport misconfigured: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    except MailDeliveryError as exc:
        logger.error("Mail delivery failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))

    logger.info(
        "Upload done: filename=%s elapsed_ms=%d",
        pdf_name,
        (time.monotonic() - started) * 1000,
    )
    return UploadResponse(filename=pdf_name, subject=mail_subject)
