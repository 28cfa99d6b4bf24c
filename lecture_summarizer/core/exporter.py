"""
Export of Markdown summaries to plain text, PDF, Word and Markdown files.
"""

import io
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from docx import Document
from docx.shared import Pt
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from lecture_summarizer.utils.helpers import strip_extension, today_stamp


@dataclass
class ContentBlock:
    """One rendered line of a summary."""
    type: str  # heading, bullet or paragraph
    text: str
    level: Optional[int] = None


def markdown_to_plain_text(md: str) -> str:
    """Strip Markdown formatting from a summary."""
    text = re.sub(r"#{1,6}\s", "", md)
    text = re.sub(r"\*\*([^*]+)\*\*", r"\1", text)
    text = re.sub(r"\*([^*]+)\*", r"\1", text)
    text = re.sub(r"`([^`]+)`", r"\1", text)
    text = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", text)
    text = text.replace("<br>", "\n")
    text = text.replace("---", "")
    text = text.replace("* [ ]", "[ ]")
    text = text.replace("* ", "- ")
    return text.strip()


def _clean_inline(text: str) -> str:
    return text.replace("**", "").replace("`", "")


def parse_markdown(md: str) -> List[ContentBlock]:
    """Split a summary into heading, bullet and paragraph blocks."""
    content = []
    for line in md.split("\n"):
        trimmed = line.strip()
        if not trimmed or trimmed in ("---", "<br>"):
            continue

        heading = re.match(r"^(#{1,6})\s+(.+)", trimmed)
        if heading:
            content.append(
                ContentBlock("heading", _clean_inline(heading.group(2)), len(heading.group(1)))
            )
            continue

        if trimmed.startswith("* ") or trimmed.startswith("- "):
            content.append(ContentBlock("bullet", _clean_inline(trimmed[2:])))
            continue

        content.append(ContentBlock("paragraph", _clean_inline(trimmed)))

    return content


def _latin1(text: str) -> str:
    # core PDF fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def export_pdf(md: str) -> bytes:
    """Render a summary as a PDF document."""
    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.set_margins(20, 20, 20)
    pdf.add_page()
    line_height = 7

    def write(text: str):
        pdf.multi_cell(0, line_height, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    for item in parse_markdown(md):
        if item.type == "heading":
            font_size = 18 if item.level == 1 else 14 if item.level == 2 else 12
            pdf.set_font("Helvetica", "B", font_size)
            write(item.text)
            pdf.ln(5)
        elif item.type == "bullet":
            pdf.set_font("Helvetica", "", 10)
            write(f"  - {item.text}")
        else:
            pdf.set_font("Helvetica", "", 10)
            write(item.text)
            pdf.ln(2)

    return bytes(pdf.output())


def export_docx(md: str) -> bytes:
    """Render a summary as a Word document."""
    document = Document()

    for item in parse_markdown(md):
        if item.type == "heading":
            document.add_heading(item.text, level=min(item.level or 3, 3))
        elif item.type == "bullet":
            document.add_paragraph(item.text, style="List Bullet")
        else:
            paragraph = document.add_paragraph(item.text)
            paragraph.paragraph_format.space_after = Pt(6)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def export_markdown(md: str) -> bytes:
    return md.encode("utf-8")


EXPORT_FORMATS: Dict[str, Tuple[Callable[[str], bytes], str, str]] = {
    "pdf": (export_pdf, "application/pdf", "pdf"),
    "docx": (
        export_docx,
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "docx",
    ),
    "md": (export_markdown, "text/markdown; charset=utf-8", "md"),
}


def export_summary(md: str, fmt: str, filename: str = "summary") -> Tuple[bytes, str, str]:
    """
    Export a summary in one of the supported formats.

    Returns:
        (file bytes, media type, download filename)
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")
    writer, media_type, extension = EXPORT_FORMATS[fmt]
    return writer(md), media_type, f"{filename}.{extension}"


def combined_markdown(items: Iterable[Tuple[str, str]]) -> str:
    """Join (filename, summary) pairs into one numbered Markdown document."""
    return "\n".join(
        f"## {index}. {filename}\n\n{summary}\n\n---\n\n"
        for index, (filename, summary) in enumerate(items, start=1)
    )


def batch_export_filename() -> str:
    return f"batch_summaries_{today_stamp()}.md"


def history_export_filename() -> str:
    return f"all_summaries_{today_stamp()}.md"


def summary_filename(filename: str) -> str:
    return f"{filename}_summary.md"


def audio_filename(filename: str) -> str:
    return f"{strip_extension(filename)}_audio.mp3"
