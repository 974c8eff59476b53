"""
BSCW API client layer.

Provides async HTTP communication with the BSCW server.
"""

from bscw_filelink.api.http_client import AsyncHttpClient, basic_auth_header, raise_for_status
from bscw_filelink.api.paths import folder_name_for, parent_path, public_url_endpoint

__all__ = [
    "AsyncHttpClient",
    "basic_auth_header",
    "folder_name_for",
    "parent_path",
    "public_url_endpoint",
    "raise_for_status",
]
