import math

import pytest

from resume_aligner.document import Document, DocumentType, ProcessingError
from resume_aligner.embeddings import (
    EmbeddingEngine,
    EmbeddingError,
    cosine_similarity,
)


class FakeEncoder:
    """Deterministic encoder recording which texts it was asked to encode."""

    def __init__(self):
        self.encoded: list[str] = []

    @staticmethod
    def _vector(text):
        return [1.0, float(len(text)), float(text.count("e"))]

    def encode(self, texts):
        self.encoded.extend(texts)
        return [self._vector(t) for t in texts]

    def encode_single(self, text):
        self.encoded.append(text)
        return self._vector(text)


@pytest.fixture
def encoder():
    return FakeEncoder()


@pytest.fixture
def engine(encoder):
    return EmbeddingEngine(encoder, batch_size=2, model_name="potion-base-8M")


def _processed(content, path="doc.txt"):
    return Document(content, path, DocumentType.RESUME).process(50, 10)


RESUME = (
    "John Doe\n\nSummary:\nExperienced developer\n\n"
    "Experience:\nSoftware Engineer at Company\n\nSkills:\nRust, Python"
)


def test_cosine_identical_vectors():
    result = cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0])
    assert result.score == pytest.approx(1.0)
    assert result.embedding_dim == 3
    assert result.text1_length == result.text2_length == 3


def test_cosine_orthogonal_vectors():
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]).score == pytest.approx(0.0)


def test_cosine_opposite_vectors():
    assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]).score == pytest.approx(-1.0)


def test_cosine_empty_vectors():
    result = cosine_similarity([], [])
    assert result.score == 0.0
    assert result.embedding_dim == 0


def test_cosine_zero_norm():
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]).score == 0.0


def test_cosine_dimension_mismatch():
    with pytest.raises(EmbeddingError):
        cosine_similarity([1.0], [1.0, 2.0])
    with pytest.raises(ProcessingError):
        cosine_similarity([1.0, 2.0, 3.0], [1.0])


def test_invalid_batch_size(encoder):
    with pytest.raises(EmbeddingError):
        EmbeddingEngine(encoder, batch_size=0)


def test_batching_preserves_order(engine):
    texts = ["alpha", "beta", "gamma", "delta", "epsilon"]
    result = engine.encode_texts_with_batching(texts)
    assert [r.text for r in result.results] == texts
    assert all(r.embedding == FakeEncoder._vector(r.text) for r in result.results)
    assert result.cache_hits + result.cache_misses == len(texts)


def test_batching_uses_cache(engine, encoder):
    engine.encode_texts_with_batching(["alpha", "beta"])
    encoder.encoded.clear()
    result = engine.encode_texts_with_batching(["beta", "gamma", "alpha"])
    assert encoder.encoded == ["gamma"]
    assert result.cache_hits == 2
    assert result.cache_misses == 1
    assert [r.text for r in result.results] == ["beta", "gamma", "alpha"]
    assert engine.cache_stats().cache_size == 3


def test_cached_results_have_zero_time(engine):
    engine.encode_single_cached("hello")
    again = engine.encode_single_cached("hello")
    assert again.from_cache
    assert again.processing_time_ms == 0
    assert again.embedding == FakeEncoder._vector("hello")


def test_encode_single_does_not_cache(engine):
    vector = engine.encode_single("hello")
    assert vector == FakeEncoder._vector("hello")
    assert engine.cache_stats().cache_size == 0
    assert engine.encode_texts(["a", "bb"]) == [FakeEncoder._vector("a"), FakeEncoder._vector("bb")]
    assert engine.cache_stats().cache_size == 0


def test_cache_returns_copies(engine):
    first = engine.encode_single_cached("hello")
    first.embedding.append(99.0)
    second = engine.encode_single_cached("hello")
    assert second.embedding == FakeEncoder._vector("hello")


def test_clear_cache(engine, encoder):
    engine.encode_single_cached("hello")
    engine.clear_cache()
    assert engine.cache_stats().cache_size == 0
    encoder.encoded.clear()
    assert not engine.encode_single_cached("hello").from_cache
    assert encoder.encoded == ["hello"]


def test_cache_stats(engine):
    stats = engine.cache_stats()
    assert stats.model_name == "potion-base-8M"
    assert stats.batch_size == 2


def test_process_document(engine):
    doc = _processed(RESUME, "resume.txt")
    embeddings = engine.process_document(doc)
    assert embeddings.document_path == "resume.txt"
    assert embeddings.model_name == "potion-base-8M"
    assert [c.text for c in embeddings.chunks] == [c.content for c in doc.chunks]
    assert [s.text for s in embeddings.sections] == [s.content for s in doc.sections]
    assert embeddings.full_document.text == RESUME


def test_document_similarity_with_itself(engine):
    doc = _processed(RESUME, "resume.txt")
    embeddings = engine.process_document(doc)
    similarity = engine.calculate_document_similarity(embeddings, embeddings)
    assert similarity.overall_similarity.score == pytest.approx(1.0)
    assert similarity.average_chunk_similarity.score == pytest.approx(1.0)
    n = len(embeddings.sections)
    assert len(similarity.section_similarities) == n * n
    assert similarity.doc1_path == similarity.doc2_path == "resume.txt"


def test_document_similarity_without_chunks(engine):
    empty = engine.process_document(_processed("", "empty.txt"))
    other = engine.process_document(_processed(RESUME, "resume.txt"))
    similarity = engine.calculate_document_similarity(empty, other)
    assert similarity.average_chunk_similarity.score == 0.0
    assert similarity.section_similarities == []
    assert not math.isnan(similarity.overall_similarity.score)