# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

from enum import Enum

from codeflow.exceptions import ValidationError


class Language(str, Enum):
    """Languages that can be executed in a sandbox."""

    JAVASCRIPT = "javascript"
    PYTHON = "python"
    SHELL = "shell"

    @property
    def runtime_image(self) -> str:
        return RUNTIME_IMAGES[self]

    @property
    def interpreter(self) -> str:
        return INTERPRETERS[self]


RUNTIME_IMAGES: dict[Language, str] = {
    Language.PYTHON: "python:3.11",
    Language.JAVASCRIPT: "node:18",
    Language.SHELL: "ubuntu:22.04",
}

INTERPRETERS: dict[Language, str] = {
    Language.PYTHON: "python3",
    Language.JAVASCRIPT: "node",
    Language.SHELL: "bash",
}

ALIASES: dict[str, Language] = {
    "javascript": Language.JAVASCRIPT,
    "js": Language.JAVASCRIPT,
    "python": Language.PYTHON,
    "py": Language.PYTHON,
    "shell": Language.SHELL,
    "bash": Language.SHELL,
}


def resolve_language(value: str | Language | None) -> Language | None:
    """Map a language tag or alias to a Language, or None if unsupported."""
    if isinstance(value, Language):
        return value
    if not value:
        return None
    return ALIASES.get(value.strip().lower())


def normalize_language(value: str | Language | None) -> Language:
    """Map a language tag or alias to a Language.

    Raises:
        ValidationError: If the value is not a supported language or alias.
    """
    language = resolve_language(value)
    if language is None:
        raise ValidationError(f"Unsupported language: {value}. Supported: JavaScript, Python, Shell")
    return language


def is_executable(value: str | None) -> bool:
    return resolve_language(value) is not None
