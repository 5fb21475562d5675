from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from dental.exceptions import WorkflowError
from dental.models import Consultation, User, XRayImage
from dental.services.notifications import notify

logger = logging.getLogger(__name__)


def validate_upload(f) -> str:
    """Check size and MIME type against the upload limits; return the content type."""
    size_mb = (f.size or 0) / (1024 * 1024)
    if size_mb > settings.UPLOAD_MAX_MB:
        raise ValueError(f"{f.name}: file is larger than {settings.UPLOAD_MAX_MB} MB")
    ctype = getattr(f, 'content_type', '') or ''
    if not any(ctype.startswith(prefix.strip()) for prefix in settings.ALLOWED_UPLOAD_TYPES if prefix.strip()):
        raise ValueError(f"{f.name}: unsupported file type {ctype or 'unknown'}")
    return ctype


def upload_xray_result(consultation: Consultation, files: Iterable, *, note: str = '',
                       radiologist: str = '', uploaded_by: Optional[User] = None) -> Consultation:
    files = list(files or [])
    if not files:
        raise ValueError("At least one X-ray image is required")

    with transaction.atomic():
        c = Consultation.objects.select_for_update().get(pk=consultation.pk)
        if c.status != Consultation.STATUS_WAITING_XRAY:
            raise WorkflowError(f"Consultation is not waiting for an X-ray (is {c.status})")
        content_types = [validate_upload(f) for f in files]
        images: List[XRayImage] = []
        for f, ctype in zip(files, content_types):
            images.append(XRayImage.objects.create(
                consultation=c, file=f, content_type=ctype, size=f.size or 0, uploaded_by=uploaded_by,
            ))
        radiologist = radiologist or (uploaded_by.display_name if uploaded_by else '')
        c.xray_result = {
            'images': [img.file.url for img in images],
            'note': note or '',
            'radiologist': radiologist,
            'uploadedAt': timezone.now().isoformat(),
        }
        c.status = Consultation.STATUS_XRAY_DONE
        c.save(update_fields=['xray_result', 'status', 'updated_at'])

    logger.info("consultation %s: %d X-ray image(s) uploaded by %s", c.id, len(images), radiologist or 'unknown')
    notify(
        type='xray',
        title='X-ray Results Ready',
        message=f"X-ray results for {c.patient.name} are ready",
        target_user=c.doctor,
        target_doctor_name='' if c.doctor_id else c.doctor_name,
    )
    return c
