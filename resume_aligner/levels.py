"""Importance, category, priority and effort levels, with simple keyword heuristics."""

from __future__ import annotations

from enum import Enum


class ImportanceLevel(Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class SkillCategory(Enum):
    TECHNICAL = "Technical"
    SOFT = "Soft"
    ROLE_SPECIFIC = "RoleSpecific"
    DOMAIN = "Domain"


class Priority(Enum):
    IMMEDIATE = "Immediate"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ImpactLevel(Enum):
    MAJOR = "Major"
    MODERATE = "Moderate"
    MINOR = "Minor"


class GapType(Enum):
    MISSING_KEYWORD = "MissingKeyword"
    MISSING_SECTION = "MissingSection"
    LOW_SIMILARITY = "LowSimilarity"
    SKILL_GAP = "SkillGap"


class SeverityLevel(Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class EffortLevel(Enum):
    MINIMAL = "Minimal"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


_CRITICAL_WORDS = ("required", "must", "essential", "mandatory")
_HIGH_WORDS = ("preferred", "strong", "proficient", "expert")

_TECH_INDICATORS = ("programming", "language", "framework", "database", "tool", "api")
_SOFT_INDICATORS = ("leadership", "communication", "management", "teamwork")
_ROLE_INDICATORS = ("engineer", "developer", "manager", "architect", "analyst")


def determine_keyword_importance(keyword: str) -> ImportanceLevel:
    """Guess how important a keyword is from the words it contains and its length."""
    lowered = keyword.lower()
    if any(word in lowered for word in _CRITICAL_WORDS):
        return ImportanceLevel.CRITICAL
    if any(word in lowered for word in _HIGH_WORDS):
        return ImportanceLevel.HIGH
    if len(keyword.encode("utf-8")) > 10:
        return ImportanceLevel.MEDIUM
    return ImportanceLevel.LOW


def categorize_skill(skill: str) -> SkillCategory:
    """Guess a skill's category; role words win over technical, technical over soft."""
    lowered = skill.lower()
    if any(word in lowered for word in _ROLE_INDICATORS):
        return SkillCategory.ROLE_SPECIFIC
    if any(word in lowered for word in _TECH_INDICATORS):
        return SkillCategory.TECHNICAL
    if any(word in lowered for word in _SOFT_INDICATORS):
        return SkillCategory.SOFT
    return SkillCategory.DOMAIN