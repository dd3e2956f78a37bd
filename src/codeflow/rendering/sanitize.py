import html
from html.parser import HTMLParser

ALLOWED_TAGS = frozenset({"strong", "em", "code", "h1", "h2", "h3", "ul", "ol", "li", "p", "span"})
ALLOWED_ATTRIBUTES = frozenset({"class"})


class _AllowListSanitizer(HTMLParser):
    """
    Re-serializes markup, keeping allow-listed tags and escaping everything else.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self.parts: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag not in ALLOWED_TAGS:
            self.parts.append(html.escape(self.get_starttag_text() or ""))
            return
        kept = "".join(
            f' {name}="{html.escape(value or "")}"' for name, value in attrs if name in ALLOWED_ATTRIBUTES
        )
        self.parts.append(f"<{tag}{kept}>")

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.parts.append(html.escape(self.get_starttag_text() or ""))

    def handle_endtag(self, tag: str) -> None:
        if tag in ALLOWED_TAGS:
            self.parts.append(f"</{tag}>")
        else:
            self.parts.append(html.escape(f"</{tag}>"))

    def handle_data(self, data: str) -> None:
        self.parts.append(html.escape(data, quote=False))

    def handle_entityref(self, name: str) -> None:
        self.parts.append(f"&{name};")

    def handle_charref(self, name: str) -> None:
        self.parts.append(f"&#{name};")

    def handle_comment(self, data: str) -> None:
        self.parts.append(html.escape(f"<!--{data}-->"))

    def handle_decl(self, decl: str) -> None:
        self.parts.append(html.escape(f"<!{decl}>"))

    def handle_pi(self, data: str) -> None:
        self.parts.append(html.escape(f"<?{data}>"))

    def unknown_decl(self, data: str) -> None:
        self.parts.append(html.escape(f"<![{data}]>"))


def sanitize_markup(markup: str) -> str:
    """Escape every tag outside the renderer's allow-list.

    Only the ``class`` attribute survives on allowed tags.
    """
    parser = _AllowListSanitizer()
    parser.feed(markup)
    parser.close()
    return "".join(parser.parts)
