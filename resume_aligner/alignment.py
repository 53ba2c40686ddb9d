"""Result structures of a resume-to-job alignment analysis."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any

from resume_aligner.document import SectionType
from resume_aligner.levels import (
    EffortLevel,
    GapType,
    ImpactLevel,
    ImportanceLevel,
    Priority,
    SeverityLevel,
    SkillCategory,
)


def _to_plain(value: Any) -> Any:
    """Turn nested dataclasses, enums and section types into plain Python data."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, SectionType):
        return str(value)
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(key): _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


@dataclass
class SectionSimilarityScore:
    section_type: SectionType | None
    similarity: float
    resume_content_preview: str
    job_content_preview: str


@dataclass
class SemanticAnalysis:
    overall_similarity: float
    section_similarities: list[SectionSimilarityScore]
    chunk_similarity_average: float
    embedding_dimension: int


@dataclass
class MatchedKeyword:
    keyword: str
    count: int
    sections: list[str]
    importance: ImportanceLevel


@dataclass
class FuzzyMatchedKeyword:
    original_keyword: str
    matched_text: str
    similarity_score: float
    sections: list[str]


@dataclass
class SkillCategoryBreakdown:
    technical_skills: float
    soft_skills: float
    role_specific: float
    overall: float


@dataclass
class KeywordAnalysis:
    ats_overall_score: float
    keyword_coverage: float
    exact_matches: list[MatchedKeyword]
    fuzzy_matches: list[FuzzyMatchedKeyword]
    skill_category_breakdown: SkillCategoryBreakdown


@dataclass
class SectionAnalysisScore:
    section_type: SectionType
    embedding_score: float
    keyword_score: float
    combined_score: float
    keyword_density: float
    missing_keywords: list[str] = field(default_factory=list)


@dataclass
class SectionAnalysis:
    section_scores: dict[str, SectionAnalysisScore]
    missing_sections: list[str]
    strength_sections: list[str]


@dataclass
class MissingSkill:
    skill: str
    category: SkillCategory
    importance: ImportanceLevel
    similar_skills: list[str] = field(default_factory=list)


@dataclass
class Recommendation:
    title: str
    description: str
    priority: Priority
    impact: ImpactLevel
    actionable_steps: list[str] = field(default_factory=list)


@dataclass
class PriorityGap:
    gap_type: GapType
    description: str
    severity: SeverityLevel
    fix_effort: EffortLevel


@dataclass
class GapAnalysis:
    missing_keywords: list[str]
    missing_skills: list[MissingSkill]
    recommendations: list[Recommendation]
    priority_gaps: list[PriorityGap]


@dataclass
class ModelInfo:
    embedding_model: str
    ats_matcher_skills: int
    llm_model: str | None = None


@dataclass
class AlignmentReport:
    """Overall and per-component alignment scores with their detailed analyses."""

    overall_score: float
    embedding_score: float
    ats_score: float
    llm_score: float | None
    semantic_analysis: SemanticAnalysis
    keyword_analysis: KeywordAnalysis
    section_analysis: SectionAnalysis
    gap_analysis: GapAnalysis
    processing_time_ms: int
    model_info: ModelInfo
    resume_path: str
    job_path: str

    def to_dict(self) -> dict[str, Any]:
        """The report as plain dicts, lists, strings and numbers, ready for JSON."""
        return _to_plain(self)