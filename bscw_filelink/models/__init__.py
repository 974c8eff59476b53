"""
Domain models for BSCW FileLink.

These are immutable (frozen) dataclasses representing the core domain concepts.
"""

from bscw_filelink.models.account import Account, LoginHandling, is_valid_base_url_format
from bscw_filelink.models.upload import Credentials, UploadJob, UploadResult, UploadState

__all__ = [
    # Account
    "Account",
    "LoginHandling",
    "is_valid_base_url_format",
    # Upload
    "Credentials",
    "UploadJob",
    "UploadResult",
    "UploadState",
]
