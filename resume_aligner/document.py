"""Documents, section detection, chunking and basic keyword extraction."""

from __future__ import annotations

import copy
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class ProcessingError(Exception):
    """Raised when a document cannot be processed."""


class DocumentType(Enum):
    RESUME = "Resume"
    JOB_DESCRIPTION = "JobDescription"


@dataclass(frozen=True)
class SectionType:
    """Kind of a document section; ``custom`` marks a free-form name."""

    name: str
    custom: bool = False

    SKILLS: ClassVar[SectionType]
    EXPERIENCE: ClassVar[SectionType]
    EDUCATION: ClassVar[SectionType]
    SUMMARY: ClassVar[SectionType]
    PROJECTS: ClassVar[SectionType]
    CERTIFICATIONS: ClassVar[SectionType]

    @classmethod
    def other(cls, name: str) -> SectionType:
        """Return a section type with a free-form name."""
        return cls(name, custom=True)

    def __str__(self) -> str:
        return self.name


SectionType.SKILLS = SectionType("Skills")
SectionType.EXPERIENCE = SectionType("Experience")
SectionType.EDUCATION = SectionType("Education")
SectionType.SUMMARY = SectionType("Summary")
SectionType.PROJECTS = SectionType("Projects")
SectionType.CERTIFICATIONS = SectionType("Certifications")

_SECTION_PATTERNS: tuple[tuple[str, SectionType, tuple[str, ...]], ...] = (
    ("skills", SectionType.SKILLS,
     ("skills", "technical skills", "core competencies", "expertise")),
    ("experience", SectionType.EXPERIENCE,
     ("experience", "work experience", "professional experience", "employment", "career")),
    ("education", SectionType.EDUCATION,
     ("education", "academic background", "qualifications", "degree")),
    ("summary", SectionType.SUMMARY,
     ("summary", "profile", "objective", "about", "overview")),
    ("projects", SectionType.PROJECTS,
     ("projects", "portfolio", "notable projects")),
    ("certifications", SectionType.CERTIFICATIONS,
     ("certifications", "certificates", "licenses")),
)

_SECTION_HEADER_WORDS = (
    "experience", "education", "skills", "summary", "projects", "certifications",
)

_CHUNK_BREAK_CHARS = frozenset(".!?")


def _lines(text: str) -> list[str]:
    """Split into lines on '\\n', dropping a trailing empty line and any '\\r' ending."""
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _line_offset(lines: list[str], line_idx: int) -> int:
    return sum(len(line) + 1 for line in lines[:line_idx])


def _alpha_lower(word: str) -> str:
    return "".join(c for c in word.lower() if c.isalpha())


@dataclass
class SectionInfo:
    start_index: int
    end_index: int
    section_type: SectionType


@dataclass
class DocumentMetadata:
    title: str | None = None
    sections: dict[str, SectionInfo] = field(default_factory=dict)
    word_count: int = 0
    character_count: int = 0


@dataclass
class DocumentChunk:
    content: str
    start_index: int
    end_index: int
    section_type: SectionType | None
    chunk_id: int


@dataclass
class DocumentSection:
    section_type: SectionType
    content: str
    start_index: int
    end_index: int
    keywords: list[str]


@dataclass
class Document:
    """A raw document together with the metadata gathered from it."""

    content: str
    file_path: str
    document_type: DocumentType
    metadata: DocumentMetadata = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.metadata is None:
            self.metadata = DocumentMetadata(
                word_count=len(self.content.split()),
                character_count=len(self.content),
            )

    def extract_title(self) -> None:
        """Take the first plausible title line among the first five lines."""
        for line in _lines(self.content)[:5]:
            trimmed = line.strip()
            if 5 < len(trimmed) < 100 and "@" not in trimmed and not trimmed.startswith("-"):
                self.metadata.title = trimmed
                return

    def detect_sections(self) -> None:
        """Find section headers; for each section the last matching header wins."""
        lines = _lines(self.content)
        for section_name, section_type, patterns in _SECTION_PATTERNS:
            for line_idx, line in enumerate(lines):
                lowered = line.lower().strip()
                ends_with_colon = line.strip().endswith(":")
                for pattern in patterns:
                    if pattern in lowered and (
                        lowered.startswith(pattern) or lowered == pattern or ends_with_colon
                    ):
                        self.metadata.sections[section_name] = SectionInfo(
                            start_index=_line_offset(lines, line_idx),
                            end_index=self._find_section_end(line_idx, lines),
                            section_type=section_type,
                        )
                        break

    def _find_section_end(self, start_line: int, lines: list[str]) -> int:
        for idx in range(start_line + 1, len(lines)):
            lowered = lines[idx].lower().strip()
            if any(word in lowered for word in _SECTION_HEADER_WORDS):
                return _line_offset(lines, idx)
        return len(self.content)

    def create_chunks(self, chunk_size: int, overlap: int) -> list[DocumentChunk]:
        """Split the content into overlapping chunks, breaking at word boundaries."""
        if chunk_size <= overlap:
            raise ProcessingError("Chunk size must be greater than overlap")

        text = self.content
        total_length = len(text)
        step_size = chunk_size - overlap
        chunks: list[DocumentChunk] = []

        for chunk_id, start in enumerate(range(0, total_length, step_size)):
            end = min(start + chunk_size, total_length)
            actual_end = end
            if end < total_length:
                for i in range(end - 1, start - 1, -1):
                    if text[i].isspace() or text[i] in _CHUNK_BREAK_CHARS:
                        actual_end = i + 1
                        break
            chunks.append(
                DocumentChunk(
                    content=text[start:actual_end].strip(),
                    start_index=start,
                    end_index=actual_end,
                    section_type=self._section_type_at(start),
                    chunk_id=chunk_id,
                )
            )
        return chunks

    def _section_type_at(self, position: int) -> SectionType | None:
        for info in self.metadata.sections.values():
            if info.start_index <= position < info.end_index:
                return info.section_type
        return None

    def process(self, chunk_size: int, overlap: int) -> ProcessedDocument:
        """Gather metadata and build chunks, sections and keywords."""
        self.extract_title()
        self.detect_sections()
        chunks = self.create_chunks(chunk_size, overlap)
        return ProcessedDocument(
            original=copy.deepcopy(self),
            chunks=chunks,
            sections=self._extract_sections(),
            keywords=self._extract_keywords(),
        )

    def _extract_sections(self) -> list[DocumentSection]:
        sections = []
        for info in self.metadata.sections.values():
            content = self.content[info.start_index:info.end_index]
            sections.append(
                DocumentSection(
                    section_type=info.section_type,
                    content=content.strip(),
                    start_index=info.start_index,
                    end_index=info.end_index,
                    keywords=_section_keywords(content),
                )
            )
        return sections

    def _extract_keywords(self) -> list[str]:
        counts = Counter(
            cleaned
            for word in self.content.split()
            if len(word) > 3
            for cleaned in (_alpha_lower(word),)
            if len(cleaned) > 3
        )
        return [word for word, _ in counts.most_common(20)]


def _section_keywords(content: str) -> list[str]:
    keywords: list[str] = []
    for word in content.split():
        if len(word) <= 2:
            continue
        cleaned = _alpha_lower(word)
        if len(cleaned) > 2 and cleaned not in keywords:
            keywords.append(cleaned)
    return keywords[:10]


@dataclass
class ProcessedDocument:
    original: Document
    chunks: list[DocumentChunk]
    sections: list[DocumentSection]
    keywords: list[str]