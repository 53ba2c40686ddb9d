"""Analysis engine combining embedding similarity with ATS keyword matching."""

from __future__ import annotations

import time
from dataclasses import dataclass

from resume_aligner.alignment import (
    AlignmentReport,
    FuzzyMatchedKeyword,
    GapAnalysis,
    KeywordAnalysis,
    MatchedKeyword,
    MissingSkill,
    ModelInfo,
    PriorityGap,
    Recommendation,
    SectionAnalysis,
    SectionAnalysisScore,
    SectionSimilarityScore,
    SemanticAnalysis,
    SkillCategoryBreakdown,
)
from resume_aligner.ats_matcher import ATSMatcher, ATSScore
from resume_aligner.document import ProcessedDocument, SectionType
from resume_aligner.embeddings import EmbeddingEngine, cosine_similarity
from resume_aligner.levels import (
    EffortLevel,
    GapType,
    ImpactLevel,
    ImportanceLevel,
    Priority,
    SeverityLevel,
    SkillCategory,
    categorize_skill,
    determine_keyword_importance,
)

_PREVIEW_LENGTH = 100
_STRENGTH_THRESHOLD = 0.7
_LOW_COVERAGE = 0.3
_IMPORTANT_SECTIONS = ("Skills", "Experience", "Education")


def truncate_text(text: str, max_length: int) -> str:
    """Keep at most ``max_length`` UTF-8 bytes of the text, marking a cut with '...'."""
    encoded = text.encode("utf-8")
    if len(encoded) <= max_length:
        return text
    return encoded[:max_length].decode("utf-8", errors="ignore") + "..."


def _section_label(section_type: SectionType | None) -> str:
    if section_type is None:
        return 'Other("Unknown")'
    if section_type.custom:
        return f'Other("{section_type.name}")'
    return section_type.name


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the embedding, keyword and language-model scores."""

    embedding_weight: float = 0.4
    keyword_weight: float = 0.3
    llm_weight: float = 0.3

    def __post_init__(self) -> None:
        if self.embedding_weight + self.keyword_weight <= 0:
            raise ValueError("Embedding and keyword weights must have a positive sum")


@dataclass
class AnalysisEngineStats:
    embedding_cache_size: int
    ats_skill_count: int
    fuzzy_threshold: float


class AnalysisEngine:
    """Coordinates semantic, keyword, section and gap analysis of a resume against a job."""

    def __init__(
        self,
        embedding_engine: EmbeddingEngine,
        ats_matcher: ATSMatcher | None = None,
        weights: ScoringWeights | None = None,
        embedding_model_name: str | None = None,
    ) -> None:
        self._embedding_engine = embedding_engine
        self._ats_matcher = ats_matcher if ats_matcher is not None else ATSMatcher()
        self._weights = weights if weights is not None else ScoringWeights()
        self._embedding_model_name = (
            embedding_model_name
            if embedding_model_name is not None
            else embedding_engine.model_name
        )

    @property
    def weights(self) -> ScoringWeights:
        return self._weights

    def analyze_alignment(
        self, resume: ProcessedDocument, job: ProcessedDocument
    ) -> AlignmentReport:
        """Run every analysis and combine the scores into one report."""
        start = time.perf_counter()

        semantic = self._semantic_analysis(resume, job)
        ats = self._ats_matcher.calculate_ats_score(resume, job)
        keyword = self._keyword_analysis(ats)
        sections = self._section_analysis(resume, job, ats)
        gaps = self._gap_analysis(ats, keyword)

        embedding_score = semantic.overall_similarity
        ats_score = keyword.ats_overall_score
        llm_score = None
        overall = self.calculate_combined_score(embedding_score, ats_score, llm_score)

        return AlignmentReport(
            overall_score=overall,
            embedding_score=embedding_score,
            ats_score=ats_score,
            llm_score=llm_score,
            semantic_analysis=semantic,
            keyword_analysis=keyword,
            section_analysis=sections,
            gap_analysis=gaps,
            processing_time_ms=int((time.perf_counter() - start) * 1000),
            model_info=ModelInfo(
                embedding_model=self._embedding_model_name,
                ats_matcher_skills=self._ats_matcher.skill_count,
                llm_model=None,
            ),
            resume_path=resume.original.file_path,
            job_path=job.original.file_path,
        )

    def _semantic_analysis(
        self, resume: ProcessedDocument, job: ProcessedDocument
    ) -> SemanticAnalysis:
        resume_embeddings = self._embedding_engine.process_document(resume)
        job_embeddings = self._embedding_engine.process_document(job)
        similarity = self._embedding_engine.calculate_document_similarity(
            resume_embeddings, job_embeddings
        )
        return SemanticAnalysis(
            overall_similarity=similarity.overall_similarity.score,
            section_similarities=[
                SectionSimilarityScore(
                    section_type=None,
                    similarity=pair.similarity.score,
                    resume_content_preview=truncate_text(pair.section1_text, _PREVIEW_LENGTH),
                    job_content_preview=truncate_text(pair.section2_text, _PREVIEW_LENGTH),
                )
                for pair in similarity.section_similarities
            ],
            chunk_similarity_average=similarity.average_chunk_similarity.score,
            embedding_dimension=similarity.overall_similarity.embedding_dim,
        )

    @staticmethod
    def _keyword_analysis(ats: ATSScore) -> KeywordAnalysis:
        categories = ats.skill_category_scores
        return KeywordAnalysis(
            ats_overall_score=ats.overall_score,
            keyword_coverage=ats.keyword_coverage,
            exact_matches=[
                MatchedKeyword(
                    keyword=match.keyword,
                    count=match.count,
                    sections=[_section_label(match.section_type)],
                    importance=determine_keyword_importance(match.keyword),
                )
                for match in ats.exact_matches
            ],
            fuzzy_matches=[
                FuzzyMatchedKeyword(
                    original_keyword=match.original_keyword,
                    matched_text=match.matched_text,
                    similarity_score=match.similarity_score,
                    sections=[_section_label(match.section_type)],
                )
                for match in ats.fuzzy_matches
            ],
            skill_category_breakdown=SkillCategoryBreakdown(
                technical_skills=categories.technical_skills,
                soft_skills=categories.soft_skills,
                role_specific=categories.role_specific,
                overall=categories.overall,
            ),
        )

    def _section_analysis(
        self, resume: ProcessedDocument, job: ProcessedDocument, ats: ATSScore
    ) -> SectionAnalysis:
        job_embedding = self._embedding_engine.encode_single(job.original.content)
        section_scores: dict[str, SectionAnalysisScore] = {}
        for section in resume.sections:
            name = str(section.section_type)
            section_embedding = self._embedding_engine.encode_single(section.content)
            embedding_score = cosine_similarity(section_embedding, job_embedding).score

            ats_section = ats.section_scores.get(name)
            keyword_score = ats_section.score if ats_section else 0.0
            density = ats_section.keyword_density if ats_section else 0.0
            missing = list(ats_section.missing_keywords) if ats_section else []

            section_scores[name] = SectionAnalysisScore(
                section_type=section.section_type,
                embedding_score=embedding_score,
                keyword_score=keyword_score,
                combined_score=self.calculate_combined_score(embedding_score, keyword_score),
                keyword_density=density,
                missing_keywords=missing,
            )

        present = {str(section.section_type) for section in resume.sections}
        return SectionAnalysis(
            section_scores=section_scores,
            missing_sections=[name for name in _IMPORTANT_SECTIONS if name not in present],
            strength_sections=[
                name
                for name, score in section_scores.items()
                if score.combined_score >= _STRENGTH_THRESHOLD
            ],
        )

    @staticmethod
    def _gap_analysis(ats: ATSScore, keyword: KeywordAnalysis) -> GapAnalysis:
        missing_skills = [
            MissingSkill(
                skill=name,
                category=categorize_skill(name),
                importance=determine_keyword_importance(name),
            )
            for name in ats.missing_keywords
        ]
        return GapAnalysis(
            missing_keywords=list(ats.missing_keywords),
            missing_skills=missing_skills,
            recommendations=_recommendations(missing_skills),
            priority_gaps=_priority_gaps(missing_skills, keyword),
        )

    def calculate_combined_score(
        self,
        embedding_score: float,
        keyword_score: float,
        llm_score: float | None = None,
    ) -> float:
        """Weighted score; without a language-model score the other two weights are rescaled."""
        w = self._weights
        if llm_score is not None:
            return (
                embedding_score * w.embedding_weight
                + keyword_score * w.keyword_weight
                + llm_score * w.llm_weight
            )
        total = w.embedding_weight + w.keyword_weight
        return (
            embedding_score * (w.embedding_weight / total)
            + keyword_score * (w.keyword_weight / total)
        )

    def get_stats(self) -> AnalysisEngineStats:
        """Embedding cache size, skill database size and fuzzy threshold."""
        return AnalysisEngineStats(
            embedding_cache_size=self._embedding_engine.cache_stats().cache_size,
            ats_skill_count=self._ats_matcher.skill_count,
            fuzzy_threshold=self._ats_matcher.fuzzy_threshold,
        )


def _recommendations(missing_skills: list[MissingSkill]) -> list[Recommendation]:
    technical = [s.skill for s in missing_skills if s.category is SkillCategory.TECHNICAL]
    soft = [s.skill for s in missing_skills if s.category is SkillCategory.SOFT]

    recommendations = []
    if technical:
        recommendations.append(
            Recommendation(
                title="Enhance Technical Skills Section",
                description=f"Add missing technical skills: {', '.join(technical)}",
                priority=Priority.HIGH,
                impact=ImpactLevel.MAJOR,
                actionable_steps=[
                    "Review job requirements for technical skills",
                    "Add relevant skills to your Skills section",
                    "Provide examples of using these skills in Experience section",
                ],
            )
        )
    if soft:
        recommendations.append(
            Recommendation(
                title="Highlight Soft Skills",
                description=f"Emphasize soft skills: {', '.join(soft)}",
                priority=Priority.MEDIUM,
                impact=ImpactLevel.MODERATE,
                actionable_steps=[
                    "Include soft skills in your Summary section",
                    "Provide specific examples in Experience descriptions",
                    "Use action verbs that demonstrate these qualities",
                ],
            )
        )
    return recommendations


def _priority_gaps(
    missing_skills: list[MissingSkill], keyword: KeywordAnalysis
) -> list[PriorityGap]:
    gaps = []
    if keyword.keyword_coverage < _LOW_COVERAGE:
        gaps.append(
            PriorityGap(
                gap_type=GapType.MISSING_KEYWORD,
                description="Low keyword coverage - resume may not pass ATS screening",
                severity=SeverityLevel.CRITICAL,
                fix_effort=EffortLevel.MEDIUM,
            )
        )
    critical = sum(1 for s in missing_skills if s.importance is ImportanceLevel.CRITICAL)
    if critical:
        gaps.append(
            PriorityGap(
                gap_type=GapType.SKILL_GAP,
                description=(
                    f"Missing {critical} critical skills that may disqualify application"
                ),
                severity=SeverityLevel.HIGH,
                fix_effort=EffortLevel.LOW,
            )
        )
    return gaps