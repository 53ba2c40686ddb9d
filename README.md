# resume_aligner

Compare a resume with a job description and measure how well they line up.

The package has no runtime dependencies. It is made of these modules:

- `resume_aligner.document`: `Document` finds a title and the sections
  (Skills, Experience, Education, Summary, Projects, Certifications), splits
  the text into overlapping chunks and picks out frequent words as keywords.
  `Document.process(chunk_size, overlap)` returns a `ProcessedDocument`. If
  `chunk_size` is not larger than `overlap`, it raises `ProcessingError`.
- `resume_aligner.ats_matcher`: `ATSMatcher` holds a built-in skill database,
  to which you can add skills of your own. It matches skills exactly and
  without regard to case (`find_exact_matches`), or fuzzily with Jaro-Winkler
  or Levenshtein similarity (`find_fuzzy_matches`). Its
  `calculate_ats_score(resume, job)` returns an `ATSScore` with keyword
  coverage, missing keywords, per-section scores and skill-category scores.
  The `jaro_winkler` and `levenshtein` functions can also be used on their
  own. `fuzzy_threshold` is a property, 0.8 by default, and any value you set
  is clamped to [0, 1]. `skill_count` gives the size of the skill database.
- `resume_aligner.embeddings`: `EmbeddingEngine` wraps any object that has
  `encode(texts)` and `encode_single(text)` methods (the `TextEncoder`
  protocol). It encodes texts in batches, caches the embeddings, embeds whole
  documents, and compares documents by cosine similarity
  (`calculate_document_similarity`). `cosine_similarity(a, b)` raises
  `EmbeddingError` if the two vectors differ in length.
- `resume_aligner.embedding_manager`: `EmbeddingModelManager` knows three
  models: `potion-base-8M`, `m2v-base` and `m2v-large`. It finds models
  already stored in a models directory and resolves a model from its id, its
  repository id or its display name. It downloads a model's files through a
  fetcher you pass in, a callable `(repo_id, file_name) -> path`.
- `resume_aligner.levels`: enums for importance, skill category, priority,
  impact, gap type, severity and effort. It also has two heuristics,
  `determine_keyword_importance` and `categorize_skill`.
- `resume_aligner.alignment`: the dataclasses that make up an
  `AlignmentReport`. `AlignmentReport.to_dict()` turns a report into plain
  data that can be written as JSON.
- `resume_aligner.analyzer`: `AnalysisEngine` combines embedding similarity
  with ATS scoring. `analyze_alignment(resume, job)` returns an
  `AlignmentReport` with section analysis, gaps and recommendations. Scores
  are weighted by `ScoringWeights`: embedding 0.4, keyword 0.3 and language
  model 0.3 by default.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from resume_aligner.analyzer import AnalysisEngine
from resume_aligner.ats_matcher import ATSMatcher
from resume_aligner.document import Document, DocumentType
from resume_aligner.embeddings import EmbeddingEngine

resume = Document(
    "Jane Example\n\nSkills:\nPython, JavaScript, React\n\nExperience:\nSoftware Engineer",
    "resume.txt",
    DocumentType.RESUME,
).process(512, 50)
job = Document(
    "We need a developer with Python and React experience. JavaScript knowledge required.",
    "job.txt",
    DocumentType.JOB_DESCRIPTION,
).process(512, 50)

score = ATSMatcher().calculate_ats_score(resume, job)
print(f"ATS score: {score.overall_score:.2f}, coverage: {score.keyword_coverage:.2f}")


class LetterCounts:
    """A toy encoder: counts of the letters a-z."""

    def encode_single(self, text):
        lowered = text.lower()
        return [float(lowered.count(c)) for c in "abcdefghijklmnopqrstuvwxyz"]

    def encode(self, texts):
        return [self.encode_single(t) for t in texts]


engine = AnalysisEngine(EmbeddingEngine(LetterCounts(), model_name="letters"))
report = engine.analyze_alignment(resume, job)
print(report.overall_score, report.section_analysis.missing_sections)
print(report.to_dict()["gap_analysis"]["recommendations"])
```

If a job description yields no keywords at all, `keyword_coverage` and the
ATS overall score are NaN.

## What the package does not do

- It does not read files. You pass documents in as text, so there is no PDF or
  Markdown extraction.
- It has no command-line program.
- It ships no embedding model. You supply the encoder.
  `EmbeddingModelManager` only stores model files that your fetcher provides.
  It raises `ModelError` when a model has to be downloaded and no fetcher was
  given.
- It does no language-model analysis. In a report, `llm_score` and
  `model_info.llm_model` are always `None`, and the overall score combines
  only the embedding and keyword scores, with their weights rescaled.