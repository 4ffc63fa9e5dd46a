"""Exceptions raised by the poetry core."""

from __future__ import annotations

from typing import Optional


class PoetryError(Exception):
    """Base class for every failure raised by :mod:`computer_poet`."""


class UnsupportedPartOfSpeechError(PoetryError, ValueError):
    """A part-of-speech tag outside the closed tag set reached selection."""

    def __init__(self, tag: object) -> None:
        super().__init__(f"Unsupported part of speech: {tag!r}")
        self.tag = tag


class EmptyCandidatePoolError(PoetryError, LookupError):
    """A filtered word pool is empty and the selection rule has no fallback."""

    def __init__(self, tag: object, reason: str, rhyme_scheme: Optional[str] = None) -> None:
        message = f"No candidates for {tag}: {reason}"
        if rhyme_scheme:
            message += f" (rhyme {rhyme_scheme!r})"
        super().__init__(message)
        self.tag = tag
        self.reason = reason
        self.rhyme_scheme = rhyme_scheme


class VocabularyLoadError(PoetryError):
    """A vocabulary or structure table could not be read."""


class InvalidOptionsError(PoetryError, ValueError):
    """Generation options failed validation."""


__all__ = [
    "PoetryError",
    "UnsupportedPartOfSpeechError",
    "EmptyCandidatePoolError",
    "VocabularyLoadError",
    "InvalidOptionsError",
]
