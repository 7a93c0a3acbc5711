#!/usr/bin/env python3
"""Decoding of libmagic classification output."""

from .. import flags as magic_flags

# libmagic escapes the newline between CONTINUE matches unless RAW is set.
CONTINUE_SEPARATOR = "\\012- "
RAW_CONTINUE_SEPARATOR = "\n- "
EXTENSION_SEPARATOR = "/"
UNKNOWN_EXTENSION = "???"

Result = str | list[str]


def decode(raw: bytes) -> str:
    return raw.decode("utf-8", "backslashreplace")


def split_matches(text: str, flags: int) -> list[str]:
    """
    Split CONTINUE output into one entry per matching rule.

    Empty fragments and the trailing ", ..." pieces libmagic appends from its
    text tests are not rules of their own and are dropped.
    """
    separator = RAW_CONTINUE_SEPARATOR if flags & magic_flags.RAW else CONTINUE_SEPARATOR
    return [
        fragment
        for fragment in text.split(separator)
        if fragment.strip() and not fragment.startswith(",")
    ]


def shape_result(raw: bytes, flags: int) -> Result:
    """
    Turn raw engine output into the value returned to callers.

    With CONTINUE every matching rule contributes one entry, in libmagic's
    match order; a single match stays a plain string. With EXTENSION the
    slash-separated list is split, and libmagic's "???" placeholder becomes
    an empty list.
    """
    text = decode(raw)

    if flags & magic_flags.CONTINUE:
        matches = split_matches(text, flags)
        if len(matches) > 1:
            return matches
        return matches[0] if matches else text

    if flags & magic_flags.EXTENSION:
        if text == UNKNOWN_EXTENSION:
            return []
        return [item for item in text.split(EXTENSION_SEPARATOR) if item]

    return text
