"""Locator parsing and serialization.

A :class:`Locator` is the parsed form of a storage URL. It is immutable:
rebuilding a URL always produces a new value via :meth:`Locator.replace`,
and the text form is serialized from the components on demand.

Fragment parameters use the ``#key=value&key2=value2`` convention, with the
``mode`` key holding a comma-separated list of access modes, e.g.::

    https://example.com/bucket/data.zarr#mode=zarr,s3&aws.region=us-west-2
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace as _replace
from typing import Any, Dict, List, Optional, Union

from locators.lib.errors import MalformedLocatorError

__all__ = [
    "Locator",
    "coerce_locator",
    "HTTPS_SCHEME",
    "S3_SCHEME",
    "GCS_SCHEME",
]

HTTPS_SCHEME = "https"
S3_SCHEME = "s3"
GCS_SCHEME = "gs3"

_SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*)://(.*)$", re.DOTALL)


@dataclass(frozen=True)
class Locator:
    """Parsed storage URL.

    Attributes:
        scheme: URL scheme as written, e.g. ``s3`` or ``https``
        host: Host exactly as written (case preserved)
        path: Path including its leading ``/``, or ``""``
        userinfo: ``user[:password]`` part of the authority, if any
        port: Port text, if any
        query: Query string without the ``?``, if any
        fragment: Fragment without the ``#``, if any
    """

    scheme: str
    host: Optional[str]
    path: str = ""
    userinfo: Optional[str] = None
    port: Optional[str] = None
    query: Optional[str] = None
    fragment: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> "Locator":
        """Parse a URL string into a Locator.

        Raises:
            MalformedLocatorError: If ``text`` is not a string or has no
                ``scheme://`` prefix.

        Example:
            >>> loc = Locator.parse("s3://my-bucket/data/file.nc#mode=zarr")
            >>> loc.scheme, loc.host, loc.path, loc.modes
            ('s3', 'my-bucket', '/data/file.nc', ['zarr'])
        """
        if not isinstance(text, str):
            raise MalformedLocatorError(
                f"Expected a URL string, got {type(text).__name__}"
            )

        match = _SCHEME_PATTERN.match(text.strip())
        if not match:
            raise MalformedLocatorError(
                "URL has no scheme; expected '<scheme>://<host>/<path>'",
                locator=text,
            )
        scheme, rest = match.groups()

        fragment = None
        if "#" in rest:
            rest, fragment = rest.split("#", 1)
        query = None
        if "?" in rest:
            rest, query = rest.split("?", 1)

        authority, slash, path = rest.partition("/")
        path = slash + path

        userinfo = None
        if "@" in authority:
            userinfo, authority = authority.rsplit("@", 1)

        host, port = _split_host_port(authority)

        return cls(
            scheme=scheme,
            host=host or None,
            path=path,
            userinfo=userinfo,
            port=port,
            query=query,
            fragment=fragment,
        )

    @property
    def url(self) -> str:
        """Full URL text serialized from the current components."""
        parts = [f"{self.scheme}://"]
        if self.userinfo is not None:
            parts.append(f"{self.userinfo}@")
        parts.append(self.host or "")
        if self.port:
            parts.append(f":{self.port}")
        parts.append(self.path)
        if self.query is not None:
            parts.append(f"?{self.query}")
        if self.fragment is not None:
            parts.append(f"#{self.fragment}")
        return "".join(parts)

    @property
    def fragment_params(self) -> Dict[str, str]:
        """Fragment parsed as ``key=value`` pairs joined by ``&``."""
        params: Dict[str, str] = {}
        if not self.fragment:
            return params
        for item in self.fragment.split("&"):
            if not item:
                continue
            key, _, value = item.partition("=")
            params[key.strip()] = value.strip()
        return params

    @property
    def modes(self) -> List[str]:
        """Lower-cased entries of the ``mode`` fragment parameter."""
        raw = self.fragment_params.get("mode", "")
        return [mode.strip().lower() for mode in raw.split(",") if mode.strip()]

    def has_mode(self, name: str) -> bool:
        """Return True if ``name`` appears in the mode list (case-insensitive)."""
        return name.lower() in self.modes

    def replace(self, **changes: Any) -> "Locator":
        """Return a copy with the given components replaced."""
        return _replace(self, **changes)

    def __str__(self) -> str:
        return self.url


def _split_host_port(authority: str) -> tuple[Optional[str], Optional[str]]:
    if authority.startswith("["):
        # IPv6 literal
        end = authority.find("]")
        if end == -1:
            return authority, None
        host, remainder = authority[: end + 1], authority[end + 1 :]
        port = remainder[1:] if remainder.startswith(":") else None
        return host, port or None
    if ":" in authority:
        host, port = authority.rsplit(":", 1)
        return host, port or None
    return authority, None


def coerce_locator(value: Union[str, Locator, None]) -> Locator:
    """Return ``value`` as a Locator, parsing strings.

    Raises:
        MalformedLocatorError: For ``None`` or any unsupported type.
    """
    if isinstance(value, Locator):
        return value
    if isinstance(value, str):
        return Locator.parse(value)
    if value is None:
        raise MalformedLocatorError("No locator given")
    raise MalformedLocatorError(
        f"Expected a URL string or Locator, got {type(value).__name__}"
    )
