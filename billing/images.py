"""Resolve image references to local files, falling back to a placeholder."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from billing.constant import PLACEHOLDER_IMAGE_REF

_REMOTE_PREFIXES = ("http://", "https://", "data:")


@dataclass(frozen=True)
class ResolvedImage:
    """Outcome of a lookup: a displayable reference or the placeholder."""

    ref: str
    path: Path | None = None
    is_placeholder: bool = False


class ImageResolver:
    """Probe candidate references in order and return the first that exists.

    Remote and data URIs are passed through untouched; local references are
    checked against ``base_dir``.
    """

    def __init__(self, candidates: Iterable[str] = (), base_dir: str | Path = ".") -> None:
        self.candidates = tuple(candidates)
        self.base_dir = Path(base_dir)

    def _probe(self, ref: str) -> ResolvedImage | None:
        ref = ref.strip()
        if not ref:
            return None
        if ref.startswith(_REMOTE_PREFIXES):
            return ResolvedImage(ref=ref)
        path = Path(ref)
        if not path.is_absolute():
            path = self.base_dir / path
        if path.is_file():
            return ResolvedImage(ref=ref, path=path)
        return None

    def resolve(self, ref: str | None = None) -> ResolvedImage:
        """Try ``ref`` first, then each configured candidate."""
        seen: set[str] = set()
        for candidate in ([ref] if ref else []) + list(self.candidates):
            if candidate in seen:
                continue
            seen.add(candidate)
            found = self._probe(candidate)
            if found is not None:
                return found
        return ResolvedImage(ref=PLACEHOLDER_IMAGE_REF, is_placeholder=True)
