import string

import pytest

from resume_aligner.analyzer import (
    AnalysisEngine,
    ScoringWeights,
    truncate_text,
)
from resume_aligner.ats_matcher import ATSMatcher
from resume_aligner.document import Document, DocumentType
from resume_aligner.embeddings import EmbeddingEngine
from resume_aligner.levels import GapType, SkillCategory


class LetterEncoder:
    def encode_single(self, text):
        lowered = text.lower()
        return [float(lowered.count(c)) for c in string.ascii_lowercase]

    def encode(self, texts):
        return [self.encode_single(text) for text in texts]


RESUME = (
    "John Doe\n\nSkills:\nPython, JavaScript, React, Node.js\n\n"
    "Experience:\nSoftware Engineer with 5 years experience"
)
JOB = "We need a developer with Python and React experience. JavaScript knowledge required."


def make_doc(content, path, kind):
    return Document(content, path, kind).process(512, 50)


@pytest.fixture
def engine():
    return AnalysisEngine(EmbeddingEngine(LetterEncoder(), 8, "letters"))


@pytest.fixture
def resume():
    return make_doc(RESUME, "resume.txt", DocumentType.RESUME)


@pytest.fixture
def job():
    return make_doc(JOB, "job.txt", DocumentType.JOB_DESCRIPTION)


def test_score_calculation_within_unit_range(engine):
    without_llm = engine.calculate_combined_score(0.8, 0.7)
    assert 0.0 < without_llm <= 1.0
    with_llm = engine.calculate_combined_score(0.8, 0.7, 0.9)
    assert 0.0 < with_llm <= 1.0


@pytest.mark.parametrize("weights", [ScoringWeights(), ScoringWeights(0.5, 0.3, 0.2)])
def test_equal_scores_combine_to_same_value(weights):
    engine = AnalysisEngine(EmbeddingEngine(LetterEncoder()), weights=weights)
    assert engine.calculate_combined_score(0.6, 0.6) == pytest.approx(0.6)
    if weights.embedding_weight + weights.keyword_weight + weights.llm_weight == pytest.approx(1.0):
        assert engine.calculate_combined_score(0.6, 0.6, 0.6) == pytest.approx(0.6)


def test_zero_weights_rejected():
    with pytest.raises(ValueError):
        ScoringWeights(0.0, 0.0, 1.0)


def test_truncate_text():
    assert truncate_text("short", 100) == "short"
    long_text = "x" * 150
    assert truncate_text(long_text, 100) == "x" * 100 + "..."


def test_analyze_alignment_report(engine, resume, job):
    report = engine.analyze_alignment(resume, job)
    assert report.llm_score is None
    assert report.resume_path == "resume.txt"
    assert report.job_path == "job.txt"
    assert report.model_info.embedding_model == "letters"
    assert report.overall_score == pytest.approx(
        engine.calculate_combined_score(report.embedding_score, report.ats_score)
    )
    assert report.keyword_analysis.ats_overall_score == report.ats_score
    assert report.semantic_analysis.embedding_dimension == 26
    assert len(report.semantic_analysis.section_similarities) == (
        len(resume.sections) * len(job.sections)
    )


def test_keyword_analysis_finds_matches(engine, resume, job):
    report = engine.analyze_alignment(resume, job)
    keywords = {m.keyword.lower() for m in report.keyword_analysis.exact_matches}
    assert {"python", "javascript", "react"} <= keywords
    assert all(len(m.sections) == 1 for m in report.keyword_analysis.exact_matches)
    assert report.keyword_analysis.keyword_coverage > 0.0


def test_section_analysis(engine, resume, job):
    analysis = engine.analyze_alignment(resume, job).section_analysis
    assert set(analysis.section_scores) == {"Skills", "Experience"}
    assert analysis.missing_sections == ["Education"]
    for name in analysis.strength_sections:
        assert analysis.section_scores[name].combined_score >= 0.7


def test_gap_analysis_flags_low_coverage_and_critical_skills(engine, resume):
    job = make_doc("Mandatory kubernetes knowledge.", "job.txt", DocumentType.JOB_DESCRIPTION)
    gaps = engine.analyze_alignment(resume, job).gap_analysis
    assert "mandatory" in gaps.missing_keywords
    kinds = {gap.gap_type for gap in gaps.priority_gaps}
    assert kinds == {GapType.MISSING_KEYWORD, GapType.SKILL_GAP}
    assert [s.skill for s in gaps.missing_skills] == gaps.missing_keywords


def test_recommendations_list_technical_skills(engine, resume):
    job = make_doc(
        "Experience with database tooling and api programming.",
        "job.txt",
        DocumentType.JOB_DESCRIPTION,
    )
    gaps = engine.analyze_alignment(resume, job).gap_analysis
    technical = [s.skill for s in gaps.missing_skills if s.category is SkillCategory.TECHNICAL]
    titles = {r.title: r for r in gaps.recommendations}
    if technical:
        description = titles["Enhance Technical Skills Section"].description
        assert all(skill in description for skill in technical)
    else:
        assert "Enhance Technical Skills Section" not in titles


def test_get_stats(resume, job):
    matcher = ATSMatcher()
    engine = AnalysisEngine(EmbeddingEngine(LetterEncoder()), matcher)
    before = engine.get_stats()
    assert before.embedding_cache_size == 0
    assert before.ats_skill_count == matcher.skill_count
    assert before.fuzzy_threshold == 0.8
    engine.analyze_alignment(resume, job)
    assert engine.get_stats().embedding_cache_size > 0