"""Embedding generation with caching and batching, plus similarity measures."""

from __future__ import annotations

import math
import time
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from resume_aligner.document import DocumentChunk, ProcessedDocument, ProcessingError


class EmbeddingError(ProcessingError):
    """Raised when embeddings cannot be produced or compared."""


class TextEncoder(Protocol):
    """A model that turns text into fixed-size vectors."""

    def encode(self, texts: Sequence[str]) -> list[list[float]]:
        ...

    def encode_single(self, text: str) -> list[float]:
        ...


@dataclass
class EmbeddingResult:
    text: str
    embedding: list[float]
    processing_time_ms: int
    from_cache: bool = False


@dataclass
class BatchEmbeddingResult:
    results: list[EmbeddingResult]
    total_processing_time_ms: int
    cache_hits: int
    cache_misses: int


@dataclass
class SimilarityScore:
    score: float
    text1_length: int
    text2_length: int
    embedding_dim: int

    @classmethod
    def zero(cls) -> SimilarityScore:
        return cls(score=0.0, text1_length=0, text2_length=0, embedding_dim=0)


@dataclass
class DocumentEmbeddings:
    document_path: str
    full_document: EmbeddingResult
    chunks: list[EmbeddingResult] = field(default_factory=list)
    sections: list[EmbeddingResult] = field(default_factory=list)
    processing_time_ms: int = 0
    model_name: str = ""


@dataclass
class SectionSimilarity:
    section1_text: str
    section2_text: str
    similarity: SimilarityScore


@dataclass
class DocumentSimilarity:
    overall_similarity: SimilarityScore
    section_similarities: list[SectionSimilarity]
    average_chunk_similarity: SimilarityScore
    doc1_path: str
    doc2_path: str


@dataclass
class CacheStats:
    cache_size: int
    model_name: str
    batch_size: int


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> SimilarityScore:
    """Cosine similarity of two vectors of equal length.

    Empty vectors, or a vector of zero norm, give a score of 0.
    """
    if len(a) != len(b):
        raise EmbeddingError(f"Embedding dimensions don't match: {len(a)} vs {len(b)}")
    if not a:
        return SimilarityScore.zero()

    dot_product = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    score = 0.0 if norm_a == 0.0 or norm_b == 0.0 else dot_product / (norm_a * norm_b)
    return SimilarityScore(
        score=score,
        text1_length=len(a),
        text2_length=len(b),
        embedding_dim=len(a),
    )


class EmbeddingEngine:
    """Encodes texts with a model, caching every embedding it computes."""

    def __init__(self, model: TextEncoder, batch_size: int = 32, model_name: str = "") -> None:
        if batch_size < 1:
            raise EmbeddingError("Batch size must be at least 1")
        self._model = model
        self._batch_size = batch_size
        self._model_name = model_name
        self._cache: dict[str, list[float]] = {}

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def _batches(self, texts: Sequence[str]) -> Iterator[Sequence[str]]:
        for start in range(0, len(texts), self._batch_size):
            yield texts[start:start + self._batch_size]

    def encode_texts_with_batching(self, texts: Sequence[str]) -> BatchEmbeddingResult:
        """Encode texts in batches, serving repeats from the cache."""
        start = time.perf_counter()
        results: list[EmbeddingResult] = []
        for batch in self._batches(texts):
            results.extend(self._process_batch(batch))
        hits = sum(1 for result in results if result.from_cache)
        return BatchEmbeddingResult(
            results=results,
            total_processing_time_ms=_elapsed_ms(start),
            cache_hits=hits,
            cache_misses=len(results) - hits,
        )

    def _process_batch(self, texts: Sequence[str]) -> list[EmbeddingResult]:
        cached = {text: self._cache[text] for text in texts if text in self._cache}
        uncached = [text for text in texts if text not in cached]

        computed: list[EmbeddingResult] = []
        if uncached:
            start = time.perf_counter()
            embeddings = self._model.encode(uncached)
            per_text_ms = _elapsed_ms(start) // len(uncached)
            for text, embedding in zip(uncached, embeddings):
                vector = list(embedding)
                self._cache[text] = vector
                computed.append(EmbeddingResult(text, list(vector), per_text_ms))

        fresh = iter(computed)
        results = []
        for text in texts:
            if text in cached:
                results.append(EmbeddingResult(text, list(cached[text]), 0, from_cache=True))
            else:
                result = next(fresh, None)
                if result is not None:
                    results.append(result)
        return results

    def encode_texts(self, texts: Sequence[str]) -> list[list[float]]:
        """Encode texts without touching the cache."""
        return [list(vector) for vector in self._model.encode(list(texts))]

    def encode_single_cached(self, text: str) -> EmbeddingResult:
        """Encode one text, using and filling the cache."""
        if text in self._cache:
            return EmbeddingResult(text, list(self._cache[text]), 0, from_cache=True)
        start = time.perf_counter()
        embedding = list(self._model.encode_single(text))
        elapsed = _elapsed_ms(start)
        self._cache[text] = embedding
        return EmbeddingResult(text, list(embedding), elapsed)

    def encode_single(self, text: str) -> list[float]:
        """Encode one text without touching the cache."""
        return list(self._model.encode_single(text))

    def process_document_chunks(self, chunks: Sequence[DocumentChunk]) -> list[EmbeddingResult]:
        """Embed the content of each chunk."""
        return self.encode_texts_with_batching([chunk.content for chunk in chunks]).results

    def process_document(self, doc: ProcessedDocument) -> DocumentEmbeddings:
        """Embed a document's chunks, its sections and its full text."""
        start = time.perf_counter()
        chunk_embeddings = self.process_document_chunks(doc.chunks)
        section_result = self.encode_texts_with_batching(
            [section.content for section in doc.sections]
        )
        full_document = self.encode_single_cached(doc.original.content)
        return DocumentEmbeddings(
            document_path=doc.original.file_path,
            full_document=full_document,
            chunks=chunk_embeddings,
            sections=section_result.results,
            processing_time_ms=_elapsed_ms(start),
            model_name=self._model_name,
        )

    def calculate_document_similarity(
        self,
        doc1_embeddings: DocumentEmbeddings,
        doc2_embeddings: DocumentEmbeddings,
    ) -> DocumentSimilarity:
        """Whole-document, every-section-pair and paired-chunk similarities."""
        overall = cosine_similarity(
            doc1_embeddings.full_document.embedding,
            doc2_embeddings.full_document.embedding,
        )

        section_similarities = [
            SectionSimilarity(
                section1_text=section1.text,
                section2_text=section2.text,
                similarity=cosine_similarity(section1.embedding, section2.embedding),
            )
            for section1 in doc1_embeddings.sections
            for section2 in doc2_embeddings.sections
        ]

        chunk_scores = [
            cosine_similarity(c1.embedding, c2.embedding)
            for c1, c2 in zip(doc1_embeddings.chunks, doc2_embeddings.chunks)
        ]
        if chunk_scores:
            first = chunk_scores[0]
            average = SimilarityScore(
                score=sum(s.score for s in chunk_scores) / len(chunk_scores),
                text1_length=first.text1_length,
                text2_length=first.text2_length,
                embedding_dim=first.embedding_dim,
            )
        else:
            average = SimilarityScore.zero()

        return DocumentSimilarity(
            overall_similarity=overall,
            section_similarities=section_similarities,
            average_chunk_similarity=average,
            doc1_path=doc1_embeddings.document_path,
            doc2_path=doc2_embeddings.document_path,
        )

    def cache_stats(self) -> CacheStats:
        """Current cache size together with the model name and batch size."""
        return CacheStats(
            cache_size=len(self._cache),
            model_name=self._model_name,
            batch_size=self._batch_size,
        )

    def clear_cache(self) -> None:
        """Forget every cached embedding."""
        self._cache.clear()