"""
Analysis report rendering

Turns the free-text answer returned by the model into the fixed
four-section report shown to the user:

- extract_section / extract_sections: slice the text between section markers
- format_text: bullet lines to lists, remaining newlines to <br>
- render_results / render_error: build the display structures
- render_report_html / render_error_html: HTML through the Jinja2 templates

Everything here is a pure function of its arguments. Missing sections and
oddly shaped text fall back to the NO_INFORMATION sentinel instead of
raising, so a partially malformed answer still renders.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup, escape

logger = logging.getLogger(__name__)

NO_INFORMATION = "No information found."

SECTION_MARKERS: Tuple[str, ...] = (
    "KEY IMPORTANT POINTS",
    "SUSPICIOUS ELEMENTS",
    "RISK ASSESSMENT",
    "RECOMMENDATIONS",
)

# marker -> (title, icon, css class)
SECTION_DISPLAY: Dict[str, Tuple[str, str, str]] = {
    "KEY IMPORTANT POINTS": ("Key Important Points", "📋", "important"),
    "SUSPICIOUS ELEMENTS": ("Suspicious Elements", "⚠️", "suspicious"),
    "RISK ASSESSMENT": ("Risk Assessment", "📊", "risk"),
    "RECOMMENDATIONS": ("Recommendations", "💡", "recommendations"),
}

BULLET_PREFIXES = ("- ", "* ")

ERROR_ICON = "❌"

_templates = Environment(
    loader=PackageLoader("lexscan", "templates"),
    autoescape=select_autoescape(["html"]),
)


@dataclass(frozen=True)
class RenderedSection:
    key: str
    title: str
    icon: str
    css_class: str
    text: str
    body: Markup


@dataclass(frozen=True)
class RenderedReport:
    file_name: str
    completed_at: datetime
    sections: List[RenderedSection] = field(default_factory=list)


@dataclass(frozen=True)
class ErrorDisplay:
    message: str
    icon: str = ERROR_ICON


# ============ Extraction ============

def extract_section(text: Optional[str], start_marker: str, end_marker: Optional[str] = None) -> str:
    """Return the stripped text between start_marker and end_marker.

    Plain case-sensitive substring search on the first occurrence. A missing
    start marker yields NO_INFORMATION; a missing end marker (or None) runs the
    section to the end of the text.
    """
    text = text or ""
    start = text.find(start_marker)
    if start == -1:
        return NO_INFORMATION

    content_start = start + len(start_marker)
    content_end = len(text)
    if end_marker:
        end = text.find(end_marker, content_start)
        if end != -1:
            content_end = end

    return text[content_start:content_end].strip()


def marker_positions(text: Optional[str]) -> List[Tuple[str, int]]:
    """First offset of every marker present in text, in SECTION_MARKERS order."""
    text = text or ""
    found = []
    for marker in SECTION_MARKERS:
        pos = text.find(marker)
        if pos != -1:
            found.append((marker, pos))
    return found


def extract_sections(text: Optional[str]) -> Dict[str, str]:
    """Extract one section per marker, keyed by marker, in fixed order.

    Each pair is extracted independently from the start of the text, so the
    markers are expected in ascending order. Out-of-order markers are logged,
    not reordered.
    """
    found = marker_positions(text)
    offsets = [pos for _, pos in found]
    if offsets != sorted(offsets):
        logger.warning(
            "Analysis sections out of order: %s",
            ", ".join(marker for marker, _ in sorted(found, key=lambda item: item[1])),
        )

    sections: Dict[str, str] = {}
    for i, marker in enumerate(SECTION_MARKERS):
        end_marker = SECTION_MARKERS[i + 1] if i + 1 < len(SECTION_MARKERS) else None
        sections[marker] = extract_section(text, marker, end_marker)
    return sections


# ============ Formatting ============

def _bullet_item(line: str) -> Optional[str]:
    for prefix in BULLET_PREFIXES:
        if line.startswith(prefix):
            return line[len(prefix):]
    return None


def _list_block(items: List[str]) -> Markup:
    return Markup("<ul>{}</ul>").format(
        Markup("").join(Markup("<li>{}</li>").format(item) for item in items)
    )


def format_text(text: Optional[str]) -> Markup:
    """Convert one section's text to escaped HTML.

    Lines starting with "- " or "* " become list items and each run of them
    one <ul>. Newlines inside a run are dropped, every other newline becomes
    <br>. Empty input gives the NO_INFORMATION sentinel.
    """
    if not text:
        return Markup(NO_INFORMATION)

    pieces: List[Markup] = []
    items: List[str] = []
    for line in text.split("\n"):
        item = _bullet_item(line)
        if item is not None:
            items.append(item)
            continue
        if items:
            pieces.append(_list_block(items))
            items = []
        pieces.append(escape(line))
    if items:
        pieces.append(_list_block(items))

    return Markup("<br>").join(pieces)


# ============ Rendering ============

def render_results(analysis_text: Optional[str], file_name: str,
                   completed_at: Optional[datetime] = None) -> RenderedReport:
    sections = extract_sections(analysis_text)
    rendered = []
    for marker in SECTION_MARKERS:
        title, icon, css_class = SECTION_DISPLAY[marker]
        rendered.append(RenderedSection(
            key=marker,
            title=title,
            icon=icon,
            css_class=css_class,
            text=sections[marker],
            body=format_text(sections[marker]),
        ))
    return RenderedReport(
        file_name=file_name or "",
        completed_at=completed_at or datetime.now(timezone.utc),
        sections=rendered,
    )


def render_error(message: Optional[str]) -> ErrorDisplay:
    return ErrorDisplay(message=message or "Internal server error")


def render_report_html(report: RenderedReport) -> Markup:
    return Markup(_templates.get_template("report.html").render(report=report))


def render_error_html(display: ErrorDisplay) -> Markup:
    return Markup(_templates.get_template("error.html").render(error=display))
