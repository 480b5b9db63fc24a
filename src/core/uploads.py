"""Validation of user-supplied documents (receipts, reimbursement proofs)."""
import os

from django.conf import settings

DEFAULT_ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "pdf")
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "application/pdf"}
DEFAULT_MAX_BYTES = 5 * 1024 * 1024


def validate_document_upload(upload):
    """Raise ``ValueError`` unless *upload* is a JPEG/PNG/PDF of at most 5 MB."""
    allowed = tuple(getattr(settings, "HR_UPLOAD_ALLOWED_EXTENSIONS", DEFAULT_ALLOWED_EXTENSIONS))
    max_bytes = getattr(settings, "HR_UPLOAD_MAX_BYTES", DEFAULT_MAX_BYTES)

    ext = os.path.splitext(upload.name or "")[1].lower().lstrip(".")
    content_type = (getattr(upload, "content_type", "") or "").lower()
    if ext not in allowed or (content_type and content_type not in ALLOWED_CONTENT_TYPES):
        raise ValueError("Format de fichier non autorise (JPEG, PNG ou PDF uniquement).")
    if upload.size > max_bytes:
        raise ValueError(f"Le fichier depasse la taille maximale de {max_bytes // (1024 * 1024)} Mo.")
    return upload
