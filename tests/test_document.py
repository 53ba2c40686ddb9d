import pytest

from resume_aligner.document import (
    Document,
    DocumentType,
    ProcessingError,
    SectionInfo,
    SectionType,
)

SECTIONED = (
    "John Doe\n\nSummary:\nExperienced developer\n\nExperience:\n"
    "Software Engineer at Company\n\nSkills:\nRust, Python"
)

CHUNK_TEXT = (
    "This is a test document with enough content to create multiple chunks "
    "when we set a small chunk size."
)


def make(content, kind=DocumentType.RESUME):
    return Document(content, "test.txt", kind)


def test_chunking():
    doc = make(CHUNK_TEXT)
    chunks = doc.create_chunks(50, 10)
    assert len(chunks) > 1
    assert len(chunks[0].content) <= 50


def test_chunk_boundaries():
    chunks = make(CHUNK_TEXT).create_chunks(50, 10)
    assert [c.start_index for c in chunks] == [0, 40, 80]
    assert [c.end_index for c in chunks] == [47, 90, 101]
    assert [c.chunk_id for c in chunks] == [0, 1, 2]
    assert chunks[0].content == "This is a test document with enough content to"
    assert chunks[1].content == "ent to create multiple chunks when we set a small"
    assert all(c.section_type is None for c in chunks)


def test_chunk_size_must_exceed_overlap():
    with pytest.raises(ProcessingError):
        make("some text").create_chunks(10, 10)


def test_empty_document_has_no_chunks():
    assert make("").create_chunks(50, 10) == []


def test_section_detection():
    doc = make(SECTIONED)
    doc.detect_sections()
    assert "summary" in doc.metadata.sections
    assert "experience" in doc.metadata.sections
    assert "skills" in doc.metadata.sections


def test_section_boundaries():
    doc = make(SECTIONED)
    doc.detect_sections()
    assert doc.metadata.sections == {
        "summary": SectionInfo(10, 19, SectionType.SUMMARY),
        "experience": SectionInfo(42, 84, SectionType.EXPERIENCE),
        "skills": SectionInfo(84, 104, SectionType.SKILLS),
    }


def test_extract_title_skips_short_and_email_lines():
    doc = make("Jo\nperson@example.com\n- bullet line\nJane Smith Resume\nOther")
    doc.extract_title()
    assert doc.metadata.title == "Jane Smith Resume"


def test_process_builds_sections_and_keywords():
    doc = make(SECTIONED)
    processed = doc.process(512, 50)
    assert processed.original.metadata.title == "John Doe"
    by_type = {s.section_type: s for s in processed.sections}
    assert by_type[SectionType.SUMMARY].content == "Summary:"
    assert by_type[SectionType.SUMMARY].keywords == ["summary"]
    assert by_type[SectionType.EXPERIENCE].content == (
        "Experience:\nSoftware Engineer at Company"
    )
    assert by_type[SectionType.EXPERIENCE].keywords == [
        "experience", "software", "engineer", "company",
    ]
    assert by_type[SectionType.SKILLS].keywords == ["skills", "rust", "python"]
    assert set(processed.keywords) == {
        "john", "summary", "experienced", "developer", "experience",
        "software", "engineer", "company", "skills", "rust", "python",
    }
    assert len(processed.chunks) == 1
    assert processed.chunks[0].section_type is None


def test_keywords_ranked_by_frequency_and_capped():
    words = " ".join(f"word{chr(97 + i)}x" for i in range(25))
    doc = make("python python python " + words)
    processed = doc.process(1000, 10)
    assert processed.keywords[0] == "python"
    assert len(processed.keywords) == 20


def test_section_type_display_and_other():
    assert str(SectionType.SKILLS) == "Skills"
    custom = SectionType.other("Volunteering")
    assert str(custom) == "Volunteering"
    assert SectionType.other("Skills") != SectionType.SKILLS
    assert SectionType.other("Awards") == SectionType.other("Awards")