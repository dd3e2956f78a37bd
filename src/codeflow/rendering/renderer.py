import html

from loguru import logger

from codeflow.languages import is_executable
from codeflow.models.segments import CodeSegment, RenderedSegment
from codeflow.rendering.highlight import highlight_syntax
from codeflow.rendering.markdown import format_text
from codeflow.rendering.sanitize import sanitize_markup
from codeflow.rendering.segments import parse_segments


def render(text: str) -> list[RenderedSegment]:
    """
    Parse assistant output and attach display markup to every segment.
    Never raises for string input.
    """
    try:
        rendered: list[RenderedSegment] = []
        for segment in parse_segments(text):
            if isinstance(segment, CodeSegment):
                rendered.append(
                    RenderedSegment(
                        type="code",
                        key=segment.key,
                        content=segment.content,
                        language=segment.language,
                        html=sanitize_markup(highlight_syntax(segment.content, segment.language)),
                        executable=is_executable(segment.language),
                    )
                )
            else:
                rendered.append(
                    RenderedSegment(
                        type="text",
                        key=segment.key,
                        content=segment.content,
                        html=sanitize_markup(format_text(segment.content)),
                    )
                )
        return rendered
    except Exception as e:
        logger.warning(f"Rendering failed, returning unformatted text: {e}")
        content = text if isinstance(text, str) else str(text)
        return [RenderedSegment(type="text", key="text-0", content=content, html=html.escape(content, quote=False))]
