"""
URL construction for BSCW folders, files and the publicURL REST API.
"""

from datetime import datetime, timezone
from urllib.parse import quote

PUBLIC_URL_API_SEGMENT = "REST/publicURL"


def folder_name_for(moment: datetime | None = None) -> str:
    """
    Build a compact, sortable folder name from a timestamp.

    The ISO-8601 UTC form with ``-``, ``:``, ``.`` and ``Z`` stripped, with
    millisecond precision, e.g. ``20240101T000000000``.
    """
    moment = moment or datetime.now(timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y%m%dT%H%M%S") + f"{moment.microsecond // 1000:03d}"


def encode_file_name(file_name: str) -> str:
    """Percent-encode a file name for use as a single path segment."""
    return quote(file_name, safe="!'()*")


def folder_url(base_url: str, folder_name: str) -> str:
    return f"{base_url}/{folder_name}"


def file_url(base_url: str, folder_name: str, file_name: str) -> str:
    return f"{base_url}/{folder_name}/{encode_file_name(file_name)}"


def public_url_endpoint(base_url: str, folder_name: str, file_name: str) -> str:
    """
    Build the publicURL REST API target for an uploaded file.

    The object id ending the base URL moves behind the API segment:
    ``https://h/bscw.cgi/7`` becomes ``https://h/bscw.cgi/REST/publicURL/7/<folder>/<file>``.
    """
    prefix, _, object_id = base_url.rpartition("/")
    encoded = encode_file_name(file_name)
    return f"{prefix}/{PUBLIC_URL_API_SEGMENT}/{object_id}/{folder_name}/{encoded}"


def parent_path(absolute_path: str) -> str:
    """
    Strip the final path segment, e.g. ``https://h/a/b`` for ``https://h/a/b/c``.
    """
    return absolute_path.rpartition("/")[0]
