"""
Account settings persistence.
"""

from bscw_filelink.storage.account_store import AccountStore
from bscw_filelink.storage.settings import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
    SettingsStore,
)

__all__ = [
    "AccountStore",
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    "SettingsStore",
]
