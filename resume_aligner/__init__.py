"""Resume and job description alignment: documents, ATS matching, embeddings and analysis."""

__version__ = "0.1.0"

__all__ = [
    "alignment",
    "analyzer",
    "ats_matcher",
    "document",
    "embedding_manager",
    "embeddings",
    "levels",
]