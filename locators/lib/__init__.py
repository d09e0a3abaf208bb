"""Locator library modules.

This package contains the parsing, classification and rebuild logic that
turns any supported storage URL into a canonical path-style URL plus a
:class:`StorageInfo` record.
"""

from locators.lib.errors import (
    BucketUnresolvedError,
    LocatorError,
    MalformedLocatorError,
    RegionUnresolvedError,
    SettingsError,
)
from locators.lib.info import StorageInfo, StorageService
from locators.lib.process import derive_rootkey, is_storage_locator, process_locator
from locators.lib.rebuild import rebuild_locator
from locators.lib.settings import LocatorSettings, load_settings
from locators.lib.shapes import AddressShape, HostClassification, classify_host
from locators.lib.uri import Locator

__all__ = [
    # Errors
    "LocatorError",
    "MalformedLocatorError",
    "RegionUnresolvedError",
    "BucketUnresolvedError",
    "SettingsError",
    # Records
    "Locator",
    "StorageInfo",
    "StorageService",
    # Classification
    "AddressShape",
    "HostClassification",
    "classify_host",
    # Pipeline
    "rebuild_locator",
    "process_locator",
    "derive_rootkey",
    "is_storage_locator",
    # Settings
    "LocatorSettings",
    "load_settings",
]
