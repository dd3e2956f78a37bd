# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

import html
import re

KEYWORDS: dict[str, frozenset[str]] = {
    "javascript": frozenset(
        {
            "const", "let", "var", "function", "return", "if", "else", "for", "while",
            "import", "export", "default", "async", "await", "try", "catch",
        }
    ),
    "jsx": frozenset(
        {
            "const", "let", "var", "function", "return", "if", "else", "for", "while",
            "import", "export", "default", "async", "await", "React", "useState", "useEffect",
        }
    ),
    "typescript": frozenset(
        {
            "const", "let", "var", "function", "return", "if", "else", "for", "while",
            "import", "export", "default", "async", "await", "interface", "type",
        }
    ),
    "python": frozenset(
        {
            "def", "class", "import", "from", "if", "else", "elif", "for", "while",
            "return", "async", "await", "try", "except", "with", "as",
        }
    ),
    "shell": frozenset(
        {
            "if", "then", "else", "elif", "fi", "for", "in", "do", "done", "while",
            "case", "esac", "function", "return", "export", "local", "echo",
        }
    ),
}  # fmt: skip

LANGUAGE_ALIASES = {
    "js": "javascript",
    "ts": "typescript",
    "tsx": "jsx",
    "py": "python",
    "bash": "shell",
    "sh": "shell",
    "zsh": "shell",
}

C_FAMILY = frozenset({"javascript", "jsx", "typescript"})
SCRIPT_FAMILY = frozenset({"python", "shell"})

_STRING = r"""(?P<string>(?P<quote>["'`])(?:\\[\s\S]|(?!(?P=quote))[^\\])*(?P=quote))"""
_WORD = r"(?P<word>[A-Za-z_$][\w$]*)"

# Comments and strings share one alternation: whichever starts first wins,
# so "//" inside a string and quotes inside a comment stay what they are.
TOKENIZERS: dict[str, re.Pattern[str]] = {
    "c": re.compile(r"(?P<comment>//[^\n]*|/\*[\s\S]*?\*/)|" + _STRING + "|" + _WORD),
    "script": re.compile(r"(?P<comment>#[^\n]*)|" + _STRING + "|" + _WORD),
    "plain": re.compile(_STRING + "|" + _WORD),
}


def resolve_highlight_language(language: str | None) -> str:
    """Map a fence tag onto a keyword set name, defaulting to javascript."""
    name = (language or "").strip().lower()
    name = LANGUAGE_ALIASES.get(name, name)
    return name if name in KEYWORDS else "javascript"


def _tokenizer_for(language: str | None) -> re.Pattern[str]:
    name = (language or "").strip().lower()
    name = LANGUAGE_ALIASES.get(name, name)
    if name in C_FAMILY:
        return TOKENIZERS["c"]
    if name in SCRIPT_FAMILY:
        return TOKENIZERS["script"]
    return TOKENIZERS["plain"]


def _span(css_class: str, text: str) -> str:
    return f'<span class="{css_class}">{html.escape(text, quote=False)}</span>'


def highlight_syntax(code: str, language: str | None) -> str:
    """Wrap keywords, string literals and comments in highlight spans.

    Unrecognized languages use the javascript keyword set and get no comment
    highlighting. Everything outside a span is HTML-escaped. The output is
    display styling only.

    Args:
        code: The code block body.
        language: The fence language tag.

    Returns:
        str: Markup with ``syntax-keyword``, ``syntax-string`` and
        ``syntax-comment`` spans.
    """
    keywords = KEYWORDS[resolve_highlight_language(language)]
    tokenizer = _tokenizer_for(language)

    out: list[str] = []
    pos = 0
    for match in tokenizer.finditer(code):
        out.append(html.escape(code[pos : match.start()], quote=False))
        kind = match.lastgroup
        token = match.group(0)
        if kind == "comment":
            out.append(_span("syntax-comment", token))
        elif kind == "word":
            out.append(_span("syntax-keyword", token) if token in keywords else token)
        else:
            out.append(_span("syntax-string", token))
        pos = match.end()
    out.append(html.escape(code[pos:], quote=False))
    return "".join(out)
