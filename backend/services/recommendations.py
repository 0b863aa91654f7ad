import re
from typing import List, Optional

from domain.models import RecommendationSection

TITLE_MARKER = "AI Recommendations"

_BULLET_RE = re.compile(r"^[*-]\s*")


def _is_section_header(line: str) -> bool:
    return line.startswith("**") and line.endswith(":**")


def _header_title(line: str) -> str:
    title = line.replace("**", "").strip()
    return title[:-1].strip() if title.endswith(":") else title


def _strip_bullet(line: str) -> str:
    """Drop a single leading '*' or '-' marker and the whitespace after it."""
    return _BULLET_RE.sub("", line, count=1).strip()


def parse_recommendations(text: Optional[str]) -> List[RecommendationSection]:
    """
    Split a free-text recommendations blob into titled sections.

    Headers look like ``**Solar Energy:**``; any other line inside a section
    becomes an item. Lines before the first header are dropped, as are
    sections that end up with no items. A leading line mentioning
    "AI Recommendations" is treated as a title and skipped.
    """
    if not text:
        return []

    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    sections: List[RecommendationSection] = []
    current: Optional[RecommendationSection] = None

    for index, line in enumerate(lines):
        if index == 0 and TITLE_MARKER in line:
            continue
        if _is_section_header(line):
            if current is not None and current.items:
                sections.append(current)
            current = RecommendationSection(title=_header_title(line))
        elif current is not None:
            item = _strip_bullet(line) if line[0] in "*-" else line
            if item:
                current.items.append(item)

    if current is not None and current.items:
        sections.append(current)
    return sections
