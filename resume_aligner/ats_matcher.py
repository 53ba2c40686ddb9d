"""Applicant-tracking-system style keyword matching and scoring."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum

from resume_aligner.document import ProcessedDocument, SectionType

_REQUIREMENT_PATTERNS = (
    re.compile(
        r"(?i)(?:required|must have|should have|experience with|knowledge of|proficient in)"
        r":?\s*([^.!?\n]+)"
    ),
    re.compile(
        r"(?i)(?:minimum|preferred)\s+(?:\d+\+?)\s+years?\s+(?:of\s+)?(?:experience\s+)?"
        r"(?:with|in)\s+([^.!?\n]+)"
    ),
)

_SKILL_DELIMITERS_RE = re.compile("[,;/|\n\u2022-]")

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)

_TECH_SKILLS = (
    # Programming languages
    "rust", "python", "javascript", "typescript", "java", "c++", "c#", "go", "ruby",
    "php", "swift", "kotlin", "scala", "haskell", "clojure", "r", "matlab",
    # Web technologies
    "react", "vue", "angular", "svelte", "html", "css", "sass", "less", "tailwind",
    "bootstrap", "jquery", "webpack", "vite", "babel", "node.js", "express",
    "nextjs", "nuxt", "gatsby", "remix",
    # Backend and infrastructure
    "docker", "kubernetes", "aws", "azure", "gcp", "terraform", "ansible",
    "jenkins", "gitlab", "github", "cicd", "devops", "microservices", "api",
    "rest", "graphql", "grpc", "redis", "elasticsearch", "nginx",
    # Databases
    "postgresql", "mysql", "mongodb", "cassandra", "dynamodb", "sqlite",
    "oracle", "sql server", "neo4j", "influxdb",
    # Data science and machine learning
    "machine learning", "deep learning", "tensorflow", "pytorch", "sklearn",
    "pandas", "numpy", "jupyter", "spark", "hadoop", "kafka", "airflow",
    # Testing
    "jest", "pytest", "junit", "selenium", "cypress", "testing", "tdd", "bdd",
)

_SOFT_SKILLS = (
    "leadership", "communication", "teamwork", "problem solving", "critical thinking",
    "creativity", "adaptability", "time management", "project management",
    "collaboration", "mentoring", "coaching", "presentation", "negotiation",
    "customer service", "analytical", "detail oriented", "organized",
)

_ROLE_KEYWORDS = (
    "software engineer", "developer", "architect", "senior", "lead", "principal",
    "manager", "director", "cto", "full stack", "frontend", "backend",
    "devops", "sre", "data scientist", "ml engineer", "product manager",
    "designer", "analyst", "consultant", "specialist",
)

_EXTRA_SKILLS = (
    "agile", "scrum", "kanban", "jira", "confluence", "slack", "git",
    "linux", "unix", "windows", "macos", "bash", "powershell",
    "vim", "emacs", "vscode", "intellij", "eclipse",
)


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def _jaro(a: str, b: str) -> float:
    a_len, b_len = len(a), len(b)
    if a_len == 0 and b_len == 0:
        return 1.0
    if a_len == 0 or b_len == 0:
        return 0.0
    if a_len == 1 and b_len == 1:
        return 1.0 if a == b else 0.0

    search_range = max(a_len, b_len) // 2 - 1
    consumed = [False] * b_len
    matches = 0
    transpositions = 0
    b_match_index = 0

    for i, a_char in enumerate(a):
        min_bound = i - search_range if i > search_range else 0
        max_bound = min(b_len - 1, i + search_range)
        for j in range(min_bound, max_bound + 1):
            if a_char == b[j] and not consumed[j]:
                consumed[j] = True
                matches += 1
                if j < b_match_index:
                    transpositions += 1
                b_match_index = j
                break

    if matches == 0:
        return 0.0
    return (
        matches / a_len + matches / b_len + (matches - transpositions) / matches
    ) / 3.0


def jaro_winkler(a: str, b: str) -> float:
    """Jaro-Winkler similarity in [0, 1], with an unbounded common-prefix bonus."""
    jaro = _jaro(a, b)
    prefix_length = 0
    for a_char, b_char in zip(a, b):
        if a_char != b_char:
            break
        prefix_length += 1
    return min(jaro + 0.1 * prefix_length * (1.0 - jaro), 1.0)


def levenshtein(a: str, b: str) -> int:
    """Number of single-character edits turning ``a`` into ``b``."""
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, a_char in enumerate(a, start=1):
        current = [i]
        for j, b_char in enumerate(b, start=1):
            cost = 0 if a_char == b_char else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def _clean_word(word: str) -> str:
    return "".join(c for c in word if c.isalnum() or c in "+#").strip()


class MatchType(Enum):
    EXACT = "Exact"
    CASE_INSENSITIVE = "CaseInsensitive"
    PARTIAL = "Partial"


class FuzzyAlgorithm(Enum):
    JARO_WINKLER = "JaroWinkler"
    LEVENSHTEIN = "Levenshtein"


@dataclass
class KeywordMatch:
    keyword: str
    positions: list[int] = field(default_factory=list)
    count: int = 0
    section_type: SectionType | None = None
    match_type: MatchType = MatchType.CASE_INSENSITIVE


@dataclass
class FuzzyMatch:
    original_keyword: str
    matched_text: str
    similarity_score: float
    position: int
    section_type: SectionType | None
    algorithm: FuzzyAlgorithm


@dataclass
class SectionScore:
    section_type: SectionType
    score: float
    matched_keywords: list[str]
    missing_keywords: list[str]
    keyword_density: float


@dataclass
class SkillCategoryScores:
    technical_skills: float
    soft_skills: float
    role_specific: float
    overall: float


@dataclass
class ATSScore:
    overall_score: float
    exact_matches: list[KeywordMatch]
    fuzzy_matches: list[FuzzyMatch]
    section_scores: dict[str, SectionScore]
    keyword_coverage: float
    missing_keywords: list[str]
    skill_category_scores: SkillCategoryScores


def _dedup_consecutive(items: list, key) -> list:
    """Drop items whose key equals that of the last kept item."""
    kept: list = []
    for item in items:
        if kept and key(kept[-1]) == key(item):
            continue
        kept.append(item)
    return kept


def _default_skill_database() -> list[str]:
    return sorted(set(_TECH_SKILLS) | set(_SOFT_SKILLS) | set(_ROLE_KEYWORDS) | set(_EXTRA_SKILLS))


class ATSMatcher:
    """Matches known skills in documents exactly and fuzzily, and scores alignment."""

    def __init__(self, additional_skills: list[str] | None = None) -> None:
        database = _default_skill_database()
        database.extend(additional_skills or [])
        # Longest patterns first so that longer skills win at a given position.
        database.sort(key=_byte_len, reverse=True)
        self._skill_database: list[str] = database

        self._pattern_lookup: dict[str, str] = {}
        for skill in database:
            self._pattern_lookup.setdefault(_ascii_lower(skill), skill)
        alternatives = [re.escape(skill) for skill in database if skill]
        self._exact_re = re.compile(
            "|".join(alternatives) if alternatives else "(?!)",
            re.IGNORECASE | re.ASCII,
        )

        self._fuzzy_threshold = 0.8
        self._tech_skills = frozenset(s.lower() for s in _TECH_SKILLS)
        self._soft_skills = frozenset(s.lower() for s in _SOFT_SKILLS)
        self._role_keywords = frozenset(s.lower() for s in _ROLE_KEYWORDS)

    @property
    def fuzzy_threshold(self) -> float:
        """Minimum similarity for a fuzzy match; set values are clamped to [0, 1]."""
        return self._fuzzy_threshold

    @fuzzy_threshold.setter
    def fuzzy_threshold(self, threshold: float) -> None:
        self._fuzzy_threshold = min(max(threshold, 0.0), 1.0)

    @property
    def skill_count(self) -> int:
        """Number of entries in the skill database."""
        return len(self._skill_database)

    def find_exact_matches(
        self, text: str, section_type: SectionType | None = None
    ) -> list[KeywordMatch]:
        """Case-insensitive, leftmost-longest skill matches; positions are UTF-8 byte offsets."""
        matches: dict[str, KeywordMatch] = {}
        char_pos = 0
        byte_pos = 0
        for found in self._exact_re.finditer(text):
            byte_pos += _byte_len(text[char_pos:found.start()])
            char_pos = found.start()
            keyword = self._pattern_lookup[_ascii_lower(found.group())]
            entry = matches.setdefault(
                keyword, KeywordMatch(keyword=keyword, section_type=section_type)
            )
            entry.positions.append(byte_pos)
            entry.count += 1
        return list(matches.values())

    def find_fuzzy_matches(
        self, text: str, section_type: SectionType | None = None
    ) -> list[FuzzyMatch]:
        """Skills resembling words of the text, best similarity first."""
        fuzzy_matches: list[FuzzyMatch] = []
        position = 0
        for word in text.split():
            word_position = position
            position += _byte_len(word) + 1

            clean = _clean_word(word)
            clean_len = _byte_len(clean)
            if clean_len < 3:
                continue
            clean_lower = clean.lower()

            for skill in self._skill_database:
                skill_lower = skill.lower()
                if clean_lower == skill_lower:
                    continue

                similarity = jaro_winkler(clean_lower, skill_lower)
                if similarity >= self._fuzzy_threshold:
                    fuzzy_matches.append(
                        FuzzyMatch(skill, clean, similarity, word_position,
                                   section_type, FuzzyAlgorithm.JARO_WINKLER)
                    )
                    continue

                skill_len = _byte_len(skill)
                if clean_len <= 8 and skill_len <= 8:
                    distance = levenshtein(clean_lower, skill_lower)
                    similarity = 1.0 - distance / max(clean_len, skill_len)
                    if similarity >= self._fuzzy_threshold:
                        fuzzy_matches.append(
                            FuzzyMatch(skill, clean, similarity, word_position,
                                       section_type, FuzzyAlgorithm.LEVENSHTEIN)
                        )

        fuzzy_matches.sort(key=lambda m: m.similarity_score, reverse=True)
        return _dedup_consecutive(
            fuzzy_matches, lambda m: (m.original_keyword, m.matched_text)
        )

    def calculate_ats_score(self, resume: ProcessedDocument, job: ProcessedDocument) -> ATSScore:
        """Score how well the resume covers the job description's keywords.

        When the job yields no keywords at all, coverage and the overall score are NaN.
        """
        job_keywords = self._extract_job_keywords(job)
        exact_matches = self._find_document_exact_matches(resume)
        fuzzy_matches = self._find_document_fuzzy_matches(resume)
        section_scores = self._calculate_section_scores(resume, job_keywords)

        matched = {m.keyword.lower() for m in exact_matches}
        matched.update(m.original_keyword.lower() for m in fuzzy_matches)

        job_lower = list(dict.fromkeys(k.lower() for k in job_keywords))
        if job_lower:
            covered = sum(1 for k in job_lower if k in matched)
            keyword_coverage = covered / len(job_lower)
        else:
            keyword_coverage = math.nan
        missing_keywords = [k for k in job_lower if k not in matched]

        skill_scores = self._calculate_skill_category_scores(matched)
        overall_score = self._calculate_overall_score(
            keyword_coverage, section_scores, skill_scores
        )

        return ATSScore(
            overall_score=overall_score,
            exact_matches=exact_matches,
            fuzzy_matches=fuzzy_matches,
            section_scores=section_scores,
            keyword_coverage=keyword_coverage,
            missing_keywords=missing_keywords,
            skill_category_scores=skill_scores,
        )

    def _extract_job_keywords(self, job: ProcessedDocument) -> list[str]:
        keywords: dict[str, None] = {}
        for section in job.sections:
            if section.section_type == SectionType.SKILLS:
                keywords.update(dict.fromkeys(section.keywords))

        for pattern in _REQUIREMENT_PATTERNS:
            for found in pattern.finditer(job.original.content):
                keywords.update(dict.fromkeys(self._extract_skills_from_text(found.group(1))))

        keywords.update(dict.fromkeys(job.keywords))
        return list(keywords)

    def _find_document_exact_matches(self, doc: ProcessedDocument) -> list[KeywordMatch]:
        all_matches: list[KeywordMatch] = []
        for section in doc.sections:
            all_matches.extend(self.find_exact_matches(section.content, section.section_type))
        all_matches.extend(self.find_exact_matches(doc.original.content, None))
        all_matches.sort(key=lambda m: m.keyword)
        return _dedup_consecutive(all_matches, lambda m: m.keyword)

    def _find_document_fuzzy_matches(self, doc: ProcessedDocument) -> list[FuzzyMatch]:
        all_matches: list[FuzzyMatch] = []
        for section in doc.sections:
            all_matches.extend(self.find_fuzzy_matches(section.content, section.section_type))
        all_matches.sort(key=lambda m: (m.original_keyword, -m.similarity_score))
        return _dedup_consecutive(
            all_matches, lambda m: (m.original_keyword, m.matched_text)
        )

    def _calculate_section_scores(
        self, resume: ProcessedDocument, job_keywords: list[str]
    ) -> dict[str, SectionScore]:
        section_scores: dict[str, SectionScore] = {}
        for section in resume.sections:
            matched_keywords = [
                m.keyword for m in self.find_exact_matches(section.content, section.section_type)
            ]
            matched_lower = {k.lower() for k in matched_keywords}
            present = [k for k in job_keywords if k.lower() in matched_lower]
            missing = [k for k in job_keywords if k.lower() not in matched_lower]

            score = len(present) / len(job_keywords) if job_keywords else 0.0
            word_count = len(section.content.split())
            density = len(matched_keywords) / word_count if word_count else 0.0

            section_scores[str(section.section_type)] = SectionScore(
                section_type=section.section_type,
                score=score,
                matched_keywords=matched_keywords,
                missing_keywords=missing,
                keyword_density=density,
            )
        return section_scores

    def _calculate_skill_category_scores(self, matched: set[str]) -> SkillCategoryScores:
        technical = len(matched & self._tech_skills) / len(self._tech_skills)
        soft = len(matched & self._soft_skills) / len(self._soft_skills)
        role = len(matched & self._role_keywords) / len(self._role_keywords)
        return SkillCategoryScores(
            technical_skills=technical,
            soft_skills=soft,
            role_specific=role,
            overall=technical * 0.5 + soft * 0.2 + role * 0.3,
        )

    @staticmethod
    def _calculate_overall_score(
        keyword_coverage: float,
        section_scores: dict[str, SectionScore],
        skill_scores: SkillCategoryScores,
    ) -> float:
        # Keyword coverage 40%, skill categories 35%, section quality 25%.
        if section_scores:
            section_avg = sum(s.score for s in section_scores.values()) / len(section_scores)
        else:
            section_avg = 0.0
        return keyword_coverage * 0.4 + skill_scores.overall * 0.35 + section_avg * 0.25

    def _extract_skills_from_text(self, text: str) -> list[str]:
        skills = []
        for part in _SKILL_DELIMITERS_RE.split(text):
            cleaned = part.strip()
            if not 2 < _byte_len(cleaned) < 50:
                continue
            cleaned_lower = cleaned.lower()
            if any(
                skill.lower() in cleaned_lower or cleaned_lower in skill.lower()
                for skill in self._skill_database
            ):
                skills.append(cleaned)
        return skills