"""Delimiter split/join helpers for hosts and object paths."""

from __future__ import annotations

from typing import Iterable, List, Optional

__all__ = ["split_segments", "join_segments"]


def split_segments(value: Optional[str], delimiter: str) -> List[str]:
    """Split ``value`` on a single-character delimiter, dropping empty segments.

    Example:
        >>> split_segments("/bucket//a/b/", "/")
        ['bucket', 'a', 'b']
        >>> split_segments(None, ".")
        []
    """
    if len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")
    if not value:
        return []
    return [segment for segment in value.split(delimiter) if segment]


def join_segments(segments: Iterable[str]) -> str:
    """Join segments with ``/``; an empty sequence joins to the empty string."""
    return "/".join(segments)
