"""Perfume page extraction.

Turns the raw markup of a Fragrantica perfume page into an
``ExtractedPerfume``.  This is a structural pattern match over a handful of
fixed markers, not a general HTML reader:

- ``<h1 class="fn">``: title, split into brand (first word) and name
- ``<div class="fragrantica-blocktext">``: description
- ``<img class="fragpic">``: bottle image
- ``<div class="...notes-top...">`` (and ``notes-middle`` / ``notes-base``):
  pyramid regions, each holding ``<div class="note">`` items

Extraction never fails.  Missing markers leave the matching field empty, and
a missing or empty title yields the "Unknown" placeholder name and brand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser
from urllib.parse import urljoin

from loguru import logger

from perfumes.models import UNKNOWN, PerfumeNote

TITLE_CLASS = "fn"
DESCRIPTION_CLASS = "fragrantica-blocktext"
IMAGE_CLASS = "fragpic"
NOTE_CLASS = "note"

# Matched as substrings of the class attribute
NOTE_REGION_MARKERS = [
    ("notes-top", PerfumeNote.TOP),
    ("notes-middle", PerfumeNote.MIDDLE),
    ("notes-base", PerfumeNote.BASE),
]

_IGNORED_TEXT_TAGS = {"script", "style"}


@dataclass
class ExtractedNote:
    name: str
    phase: str


@dataclass
class ExtractedPerfume:
    """Candidate record produced from one page."""

    source_url: str
    name: str = UNKNOWN
    brand: str = UNKNOWN
    description: str | None = None
    image_url: str | None = None
    notes: list[ExtractedNote] = field(default_factory=list)

    def notes_for(self, phase: str) -> list[ExtractedNote]:
        return [note for note in self.notes if note.phase == phase]


@dataclass
class _Capture:
    """An element whose text is being collected until its end tag."""

    kind: str
    tag: str
    phase: str | None = None
    depth: int = 1
    chunks: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join("".join(self.chunks).split())


class PerfumePageParser(HTMLParser):
    """Collect the title, description, image and note pyramid from a page."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.title: str | None = None
        self.description: str | None = None
        self.image_src: str | None = None
        self.notes: list[ExtractedNote] = []

        self._open: list[_Capture] = []
        self._seen: set[str] = set()
        self._ignore_depth = 0

    # -- HTMLParser hooks --------------------------------------------------

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _IGNORED_TEXT_TAGS:
            self._ignore_depth += 1
            return

        for capture in self._open:
            if capture.tag == tag:
                capture.depth += 1

        attr_dict = {k.lower(): (v or "") for k, v in attrs}
        class_attr = attr_dict.get("class", "")
        classes = class_attr.split()

        if tag == "h1" and TITLE_CLASS in classes:
            self._begin("title", tag)
        elif tag == "img" and IMAGE_CLASS in classes:
            if "image" not in self._seen and attr_dict.get("src", "").strip():
                self._seen.add("image")
                self.image_src = attr_dict["src"].strip()
        elif tag == "div":
            if DESCRIPTION_CLASS in classes:
                self._begin("description", tag)
            for marker, phase in NOTE_REGION_MARKERS:
                if marker in class_attr:
                    self._begin(f"region:{phase}", tag, phase=phase)
            if NOTE_CLASS in classes:
                region = self._innermost_region()
                if region is not None:
                    self._open.append(_Capture("note", tag, phase=region.phase))

    def handle_endtag(self, tag: str) -> None:
        if tag in _IGNORED_TEXT_TAGS:
            self._ignore_depth = max(0, self._ignore_depth - 1)
            return

        for capture in list(reversed(self._open)):
            if capture.tag != tag:
                continue
            capture.depth -= 1
            if capture.depth == 0:
                self._open.remove(capture)
                self._finish(capture)

    def handle_data(self, data: str) -> None:
        if self._ignore_depth:
            return
        for capture in self._open:
            if not capture.kind.startswith("region:"):
                capture.chunks.append(data)

    def close(self) -> None:
        super().close()
        self.flush()

    def flush(self) -> None:
        """Finish elements left open at end of input."""
        while self._open:
            self._finish(self._open.pop(0))

    # -- helpers -----------------------------------------------------------

    def _begin(self, kind: str, tag: str, phase: str | None = None) -> None:
        """Open a capture for the first occurrence of *kind* only."""
        if kind in self._seen:
            return
        self._seen.add(kind)
        self._open.append(_Capture(kind, tag, phase=phase))

    def _innermost_region(self) -> _Capture | None:
        for capture in reversed(self._open):
            if capture.kind.startswith("region:"):
                return capture
        return None

    def _finish(self, capture: _Capture) -> None:
        if capture.kind == "title":
            self.title = capture.text
        elif capture.kind == "description":
            self.description = capture.text or None
        elif capture.kind == "note" and capture.text:
            self.notes.append(ExtractedNote(name=capture.text, phase=capture.phase))


def split_title(title: str | None) -> tuple[str, str]:
    """Split a page title into (brand, name).

    The brand is the first whitespace-delimited word; the rest is the name.
    An empty title gives the placeholder for both, a one-word title gives a
    placeholder name.
    """
    words = (title or "").split(maxsplit=1)
    if not words:
        return UNKNOWN, UNKNOWN
    brand = words[0]
    name = words[1].strip() if len(words) > 1 else ""
    return brand, name or UNKNOWN


def extract_perfume(html: str, source_url: str) -> ExtractedPerfume:
    """Extract a candidate perfume record from *html* fetched at *source_url*."""
    parser = PerfumePageParser()
    try:
        parser.feed(html or "")
        parser.close()
    except Exception as exc:
        logger.warning(f"Markup parse error for {source_url}, keeping partial result: {exc}")
        parser.flush()

    brand, name = split_title(parser.title)
    image_url = urljoin(source_url, parser.image_src) if parser.image_src else None

    # Notes grouped by phase, markup order kept within each phase
    notes = [
        note
        for _, phase in NOTE_REGION_MARKERS
        for note in parser.notes
        if note.phase == phase
    ]

    extracted = ExtractedPerfume(
        source_url=source_url,
        name=name,
        brand=brand,
        description=parser.description,
        image_url=image_url,
        notes=notes,
    )
    logger.debug(
        f"Extracted {extracted.brand!r} {extracted.name!r} from {source_url}: "
        f"{len(extracted.notes)} notes, "
        f"description={'yes' if extracted.description else 'no'}, "
        f"image={'yes' if extracted.image_url else 'no'}"
    )
    return extracted
