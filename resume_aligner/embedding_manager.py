"""Catalogue, discovery and download of static embedding models."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from resume_aligner.document import ProcessingError

Fetcher = Callable[[str, str], "str | Path"]
"""Given a repository id and a file name, return the path of a local copy of the file.

A fetcher raises any exception when the file cannot be obtained.
"""

_REQUIRED_FILES = ("tokenizer.json",)
_MODEL_FILES = ("model.onnx", "model.safetensors")
_DOWNLOAD_FILES = (
    "model.safetensors",
    "model.onnx",
    "tokenizer.json",
    "config.json",
    "README.md",
)
# Only one model format is needed, so the ONNX file may be absent.
_OPTIONAL_FILES = frozenset({"README.md", "config.json", "model.onnx"})
_PREFERRED_ORDER = ("potion-base-8M", "m2v-base", "m2v-large")
_DEFAULT_MODEL = "potion-base-8M"


class ModelError(ProcessingError):
    """Raised when a model cannot be found, stored or downloaded."""


class EmbeddingModelType(Enum):
    MODEL2VEC = "Model2Vec"
    POTION = "Potion"


@dataclass(frozen=True)
class EmbeddingModelInfo:
    name: str
    repo_id: str
    size_mb: int
    description: str
    model_type: EmbeddingModelType
    dimensions: int
    capabilities: tuple[str, ...] = field(default_factory=tuple)


def _known_models() -> dict[str, EmbeddingModelInfo]:
    return {
        "potion-base-8M": EmbeddingModelInfo(
            name="Potion Base 8M",
            repo_id="minishlab/potion-base-8M",
            size_mb=33,
            description="High-quality Model2Vec embeddings with 8M parameters",
            model_type=EmbeddingModelType.POTION,
            dimensions=256,
            capabilities=("text-embeddings", "semantic-search", "similarity-analysis"),
        ),
        "m2v-base": EmbeddingModelInfo(
            name="Model2Vec Base",
            repo_id="minishlab/M2V_base_output",
            size_mb=90,
            description="Legacy Model2Vec base embeddings model",
            model_type=EmbeddingModelType.MODEL2VEC,
            dimensions=256,
            capabilities=("text-embeddings", "semantic-search"),
        ),
        "m2v-large": EmbeddingModelInfo(
            name="Model2Vec Large",
            repo_id="minishlab/M2V_large_output",
            size_mb=250,
            description="High-capacity Model2Vec large embeddings model",
            model_type=EmbeddingModelType.MODEL2VEC,
            dimensions=512,
            capabilities=("text-embeddings", "semantic-search", "high-accuracy"),
        ),
    }


def _is_model_directory(path: Path) -> bool:
    """True when the directory holds a model file and every required file."""
    if not any((path / name).exists() for name in _MODEL_FILES):
        return False
    return all((path / name).exists() for name in _REQUIRED_FILES)


class EmbeddingModelManager:
    """Keeps track of known and locally stored embedding models and fetches missing ones."""

    def __init__(self, models_dir: str | Path, fetcher: Fetcher | None = None) -> None:
        self._models_dir = Path(models_dir)
        self._fetcher = fetcher
        self._available: dict[str, EmbeddingModelInfo] = _known_models()
        self._downloaded: set[str] = set()

        try:
            self._models_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ModelError(f"Failed to create models directory: {exc}") from exc
        self._scan_downloaded_models()

    @property
    def models_dir(self) -> Path:
        return self._models_dir

    def _scan_downloaded_models(self) -> None:
        try:
            entries = list(self._models_dir.iterdir())
        except OSError as exc:
            raise ModelError(f"Failed to scan models directory: {exc}") from exc
        for entry in entries:
            if entry.is_dir() and _is_model_directory(entry):
                self._downloaded.add(entry.name)

    def download_model(self, model_id: str) -> Path:
        """Fetch a known model's files into the models directory and return its path."""
        info = self._available.get(model_id)
        if info is None:
            raise ModelError(f"Unknown embedding model: {model_id}")

        model_dir = self._models_dir / model_id
        if model_id in self._downloaded:
            return model_dir
        if self._fetcher is None:
            raise ModelError(f"No fetcher configured to download model: {model_id}")

        print(f"Downloading embedding model: {info.name} ({info.size_mb} MB)")
        print(f"Repository: {info.repo_id}")

        try:
            model_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ModelError(f"Failed to create model directory: {exc}") from exc

        for file_name in _DOWNLOAD_FILES:
            try:
                fetched = Path(self._fetcher(info.repo_id, file_name))
            except Exception as exc:
                if file_name in _OPTIONAL_FILES:
                    print(f"  Optional file {file_name} not found: {exc}")
                    continue
                raise ModelError(
                    f"Failed to download required file {file_name}: {exc}"
                ) from exc
            try:
                shutil.copyfile(fetched, model_dir / file_name)
            except OSError as exc:
                raise ModelError(f"Failed to copy {file_name}: {exc}") from exc
            print(f"  Downloaded: {file_name}")

        self._downloaded.add(model_id)
        print(f"Embedding model {info.name} downloaded successfully!")
        return model_dir

    def get_model_path(self, model_id: str) -> Path | None:
        """Path of a downloaded model, or None when it is not stored locally."""
        if model_id in self._downloaded:
            return self._models_dir / model_id
        return None

    def ensure_model_available(self, model_id: str) -> Path:
        """Return the model's path, downloading it first when needed."""
        path = self.get_model_path(model_id)
        if path is not None:
            return path
        return self.download_model(model_id)

    def list_available_models(self) -> list[EmbeddingModelInfo]:
        """Every model this manager knows how to obtain."""
        return list(self._available.values())

    def list_downloaded_models(self) -> list[str]:
        """Ids of the models stored locally, in sorted order."""
        return sorted(self._downloaded)

    def auto_select_model(self) -> str:
        """The first downloaded model in order of preference, else the default model."""
        for model_id in _PREFERRED_ORDER:
            if model_id in self._downloaded:
                return model_id
        return _DEFAULT_MODEL

    def get_model_info(self, model_id: str) -> EmbeddingModelInfo | None:
        return self._available.get(model_id)

    def is_model_downloaded(self, model_id: str) -> bool:
        return model_id in self._downloaded

    def resolve_model_id(self, query: str) -> str | None:
        """Map a model id, repository id or display name (any case) to a model id."""
        if query in self._available:
            return query
        for model_id, info in self._available.items():
            if info.repo_id == query:
                return model_id
        lowered = query.lower()
        for model_id, info in self._available.items():
            if info.name.lower() == lowered:
                return model_id
        return None