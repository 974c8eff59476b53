"""
Business logic services for BSCW FileLink.
"""

from bscw_filelink.services.filelink_service import (
    FilelinkService,
    SaveResult,
    SettingsMessage,
    VerificationResult,
)
from bscw_filelink.services.upload_service import UploadClient

__all__ = [
    "FilelinkService",
    "SaveResult",
    "SettingsMessage",
    "UploadClient",
    "VerificationResult",
]
