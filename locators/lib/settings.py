"""Configuration defaults for locator resolution.

:class:`LocatorSettings` answers the two questions the locator pipeline
cannot answer from the URL alone: which region to use when none is embedded
in the host, and which credential profile is active.

Settings are usually loaded from YAML::

    region: ${DEPLOY_REGION}
    profile: analytics
    hosts:
      minio.internal:
        region: eu-central-1
        profile: minio

Values may reference environment variables with ``${VAR}`` or ``$VAR``. When
``use_aws_config`` is enabled the shared AWS config files are consulted
through botocore after the explicit settings and environment variables.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import botocore.session
import yaml
from botocore.exceptions import BotoCoreError, ProfileNotFound

from locators.lib.errors import SettingsError
from locators.lib.uri import Locator

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_REGION",
    "LocatorSettings",
    "expand_env_vars",
    "get_config_value",
    "load_settings",
]

DEFAULT_REGION = "us-east-1"

REGION_FRAGMENT_KEY = "aws.region"
PROFILE_FRAGMENT_KEY = "aws.profile"

# Pattern for ${VAR_NAME} or $VAR_NAME
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def expand_env_vars(value: str) -> str:
    """Expand ``${VAR}`` and ``$VAR`` references; unknown variables are left as-is.

    Example:
        >>> os.environ["DEPLOY_REGION"] = "eu-west-1"
        >>> expand_env_vars("${DEPLOY_REGION}")
        'eu-west-1'
    """

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1) or match.group(2))
        return match.group(0) if env_value is None else env_value

    return ENV_VAR_PATTERN.sub(replacer, value)


def get_config_value(
    options: Optional[Mapping[str, Any]],
    key: str,
    env_var: Optional[str] = None,
    default: Optional[str] = None,
) -> Optional[str]:
    """Get a value from an options mapping, then an environment variable.

    String option values have ``${VAR}`` references expanded. Empty strings
    count as unset.

    Example:
        >>> get_config_value({"region": "eu-west-1"}, "region", "AWS_REGION")
        'eu-west-1'
        >>> get_config_value({}, "profile", "AWS_PROFILE", "default")
        'default'
    """
    value = options.get(key) if options else None
    if value is not None and not isinstance(value, str):
        value = str(value)
    if value:
        value = expand_env_vars(value)
    if not value and env_var:
        value = os.environ.get(env_var)
    return value or default


class LocatorSettings:
    """Region and credential-profile defaults for storage locators.

    Args:
        options: Settings mapping (``region``, ``profile``, ``hosts``)
        fallback_region: Region used when nothing else supplies one. ``None``
            disables the fallback so unresolved regions raise.
        use_aws_config: Consult the shared AWS config/credentials files.
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        fallback_region: Optional[str] = DEFAULT_REGION,
        use_aws_config: bool = True,
    ) -> None:
        self.options: Dict[str, Any] = dict(options or {})
        self.fallback_region = fallback_region
        self.use_aws_config = use_aws_config
        self._hosts = _normalize_hosts(self.options.get("hosts"))

    def host_options(self, locator: Optional[Locator]) -> Dict[str, Any]:
        """Per-host overrides matching the locator's host, if any."""
        if locator is None or not locator.host:
            return {}
        return self._hosts.get(locator.host.lower(), {})

    def default_region(self, locator: Optional[Locator]) -> Optional[str]:
        """Region to use for ``locator`` when the URL itself does not name one."""
        if locator is not None:
            region = locator.fragment_params.get(REGION_FRAGMENT_KEY)
            if region:
                return region

        region = (
            get_config_value(self.host_options(locator), "region")
            or get_config_value(self.options, "region", "AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION")
        )
        if region:
            return region

        if self.use_aws_config:
            region = self._profile_region(self.active_profile(locator))
            if region:
                return region

        return self.fallback_region

    def active_profile(self, locator: Optional[Locator]) -> Optional[str]:
        """Name of the credential profile in effect for ``locator``, if any."""
        if locator is not None:
            profile = locator.fragment_params.get(PROFILE_FRAGMENT_KEY)
            if profile:
                return profile

        profile = get_config_value(
            self.host_options(locator), "profile"
        ) or get_config_value(self.options, "profile", "AWS_PROFILE")
        if profile:
            return profile

        if self.use_aws_config and "default" in self._available_profiles():
            return "default"
        return None

    def _available_profiles(self) -> list[str]:
        try:
            return list(botocore.session.Session().available_profiles)
        except BotoCoreError as exc:
            logger.warning("Could not read AWS configuration: %s", exc)
            return []

    def _profile_region(self, profile: Optional[str]) -> Optional[str]:
        try:
            return botocore.session.Session(profile=profile).get_config_variable("region")
        except ProfileNotFound:
            logger.warning(
                "AWS profile '%s' not found in the AWS config files; ignoring it",
                profile,
            )
        except BotoCoreError as exc:
            logger.warning("Could not read AWS configuration: %s", exc)
        return None

    def __repr__(self) -> str:
        return (
            f"LocatorSettings(options={self.options!r}, "
            f"fallback_region={self.fallback_region!r}, "
            f"use_aws_config={self.use_aws_config!r})"
        )


def _normalize_hosts(hosts: Any) -> Dict[str, Dict[str, Any]]:
    if not hosts:
        return {}
    if not isinstance(hosts, Mapping):
        raise SettingsError(
            "'hosts' must be a mapping of host name to settings",
            field="hosts",
        )
    result: Dict[str, Dict[str, Any]] = {}
    for host, values in hosts.items():
        if not isinstance(values, Mapping):
            raise SettingsError(
                f"Settings for host '{host}' must be a mapping",
                field=f"hosts.{host}",
            )
        result[str(host).lower()] = dict(values)
    return result


def load_settings(
    path: Union[str, Path],
    **kwargs: Any,
) -> LocatorSettings:
    """Load :class:`LocatorSettings` from a YAML file.

    Args:
        path: YAML file containing a settings mapping
        **kwargs: Passed through to :class:`LocatorSettings`

    Raises:
        SettingsError: If the file is missing, unparsable, or not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise SettingsError("Settings file not found", path=str(path))

    try:
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise SettingsError(
            f"Invalid YAML in settings file: {exc}", path=str(path)
        ) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsError(
            f"Settings file must contain a mapping, got {type(data).__name__}",
            path=str(path),
        )

    logger.debug("Loaded locator settings from %s", path)
    return LocatorSettings(data, **kwargs)
