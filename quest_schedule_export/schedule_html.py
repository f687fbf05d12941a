"""
Parse a saved Quest "My Class Schedule" page (PeopleSoft, List View)
into RawScheduleRow values for the compiler.

Usage pattern:
- Log in to Quest, open Class Schedule and switch to "List View"
- Save the page with "Save As → Webpage, Complete"
- This module reads the saved HTML (following the iframe if the outer
  frame was saved instead of the content page)

The real HTML structure:
- One div.PSGROUPBOXWBO per enrolled course, titled by a
  td.PAGROUPDIVIDER such as "CS 135 - Designing Functional Programs".
- Inside it a table.PSLEVEL3GRID with one <tr> per meeting. Cells are
  identified by id fragments (MTG_SCHED$0, MTG_LOC$0, ...).
- A course component that meets at several times has continuation rows
  whose class number / section / component cells are blank (&nbsp;).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup, Tag  # type: ignore[import]

from .models import RawScheduleRow

logger = logging.getLogger(__name__)

SCHEDULE_PAGE_TITLE = "My Class Schedule"


@dataclass
class ClassSchedulePage:
    rows: List[RawScheduleRow] = field(default_factory=list)
    student_name: str = ""
    title: str = ""
    list_view: bool = True


def _clean(text: str) -> str:
    return re.sub(r"\s+", " ", text.replace("\xa0", " ")).strip()


def _field(row: Tag, tag: str, id_fragment: str) -> str:
    el = row.find(tag, id=re.compile(re.escape(id_fragment)))
    return _clean(el.get_text(" ")) if el else ""


# ──────────────────────────────────────────────────────────────────
#  Portal frame
# ──────────────────────────────────────────────────────────────────

# Quest renders pages inside the portal's "TargetContent" frame. A browser's
# "Webpage, Complete" save writes the frame document under <page>_files/ and
# rewrites the src to a relative, percent-encoded path. "Save Link As" on the
# portal keeps the live URL, so only the file name can be matched.
_TARGET_FRAME_SRC = re.compile(r"SSR_SSENRL_LIST", re.I)


def _target_frame_src(soup: BeautifulSoup) -> str:
    frame = (
        soup.find("iframe", attrs={"name": "TargetContent"})
        or soup.find("iframe", id="ptifrmtgtframe")
        or soup.find("iframe", src=_TARGET_FRAME_SRC)
    )
    return (frame.get("src") or "").strip() if frame else ""


def _saved_frame_paths(html_path: Path, src: str) -> List[Path]:
    url = urlparse(src)
    local = unquote(url.path)
    paths: List[Path] = []
    if not url.scheme and local:
        paths.append(html_path.parent / local)
    name = PurePosixPath(local).name
    if name:
        paths.append(html_path.parent / f"{html_path.stem}_files" / name)
    return paths


def _load_target_frame(html_path: Path, soup: BeautifulSoup) -> Optional[str]:
    """Return the saved TargetContent document, or None if this page has no portal frame."""
    src = _target_frame_src(soup)
    if not src:
        return None
    for path in _saved_frame_paths(html_path, src):
        if path.is_file():
            logger.debug("Reading portal frame content from %s", path)
            return path.read_text(encoding="utf-8", errors="ignore")
    logger.warning("Portal frame %s was not saved next to %s", src, html_path)
    return None


# ──────────────────────────────────────────────────────────────────
#  Course boxes
# ──────────────────────────────────────────────────────────────────

def _parse_course_box(box: Tag) -> List[RawScheduleRow]:
    divider = box.find(class_="PAGROUPDIVIDER")
    title = _clean(divider.get_text(" ")) if divider else ""
    parts = title.split(" - ", 1)
    course_code = parts[0].strip()
    course_name = parts[1].strip() if len(parts) > 1 else ""

    grid = box.find(class_="PSLEVEL3GRID")
    if grid is None:
        return []

    rows: List[RawScheduleRow] = []
    class_number = section = component = ""
    for tr in grid.find_all("tr"):
        sched = tr.find("span", id=re.compile(r"MTG_SCHED"))
        if sched is None:
            # header or spacer row
            continue

        # Continuation rows leave these blank and belong to the row above
        nbr = _field(tr, "span", "DERIVED_CLS_DTL_CLASS_NBR")
        if nbr:
            class_number = nbr
            section = _field(tr, "a", "MTG_SECTION") or _field(tr, "span", "MTG_SECTION")
            component = _field(tr, "span", "MTG_COMP")

        rows.append(
            RawScheduleRow(
                days_times=_clean(sched.get_text(" ")),
                start_end_date=_field(tr, "span", "MTG_DATES"),
                room=_field(tr, "span", "MTG_LOC"),
                instructor=_field(tr, "span", "DERIVED_CLS_DTL_SSR_INSTR_LONG"),
                course_code=course_code,
                course_name=course_name,
                section=section,
                component=component,
                class_number=class_number,
            )
        )
    return rows


def _is_list_view(soup: BeautifulSoup) -> bool:
    # The first radio button on the page is "List View"
    radio = soup.find("input", class_="PSRADIOBUTTON")
    if radio is None:
        return True
    return radio.has_attr("checked")


# ──────────────────────────────────────────────────────────────────
#  Public API
# ──────────────────────────────────────────────────────────────────

def parse_class_schedule_html(
    html_path: str | Path | None = None,
    html_content: str | None = None,
) -> ClassSchedulePage:
    """
    Parse a saved "My Class Schedule" page.

    :param html_path: Path to the saved HTML file.
    :param html_content: Raw HTML string (alternative to html_path).
    :returns: The meeting rows in page order plus the page's student name.
    """
    if html_content is not None:
        html = html_content
        resolved_path = None
    elif html_path is not None:
        resolved_path = Path(html_path)
        html = resolved_path.read_text(encoding="utf-8", errors="ignore")
    else:
        raise ValueError("Provide either html_path or html_content.")

    soup = BeautifulSoup(html, "html.parser")

    if resolved_path:
        frame_html = _load_target_frame(resolved_path, soup)
        if frame_html:
            soup = BeautifulSoup(frame_html, "html.parser")

    boxes = soup.find_all(class_="PSGROUPBOXWBO")
    if not boxes:
        raise ValueError(
            "Could not find any courses in the HTML.\n"
            "Possible causes:\n"
            "  1. The page is not Quest's 'My Class Schedule'\n"
            "  2. The iframe content was not saved (use 'Save As → Webpage, Complete')\n"
            "Please check that the saved file includes the actual schedule content."
        )

    rows: List[RawScheduleRow] = []
    for box in boxes:
        rows.extend(_parse_course_box(box))

    title_el = soup.find(class_="PATRANSACTIONTITLE")
    name_el = soup.find(id="DERIVED_SSTSNAV_PERSON_NAME")
    page = ClassSchedulePage(
        rows=rows,
        student_name=_clean(name_el.get_text(" ")) if name_el else "",
        title=_clean(title_el.get_text(" ")) if title_el else "",
        list_view=_is_list_view(soup),
    )
    logger.info("Found %d meeting row(s) in %d course(s)", len(rows), len(boxes))
    return page
