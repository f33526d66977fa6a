"""Request, URL and upload-token signing."""

from .credentials import FORM_CONTENT_TYPE, Credentials, urlsafe_b64encode
from .upload_policy import UploadPolicy

__all__ = [
    "FORM_CONTENT_TYPE",
    "Credentials",
    "UploadPolicy",
    "urlsafe_b64encode",
]
