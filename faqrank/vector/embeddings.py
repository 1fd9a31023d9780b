"""
Embedding providers and the caching embeddings service.
The model itself is external; providers only turn text into a fixed-length vector.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
import hashlib
import time
from typing import Dict, List, Optional

from ..core.errors import DimensionMismatchError, InvalidInputError
from ..util.logging import logger
from .cache import EmbeddingCache, text_hash

MAX_TEXT_LENGTH = 8191


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider.

    Reproducible vectors without a model download, for tests and offline
    indexing. Similar texts do NOT get similar vectors; only identical texts do.
    """

    def __init__(self, dimension: int = 384):
        if dimension < 1:
            raise ValueError("dimension must be >= 1")
        self.dimension = dimension

    def embed_text(self, text: str) -> list[float]:
        """Generate deterministic embedding vector by chaining SHA-256 digests."""
        vector = []
        counter = 0
        while len(vector) < self.dimension:
            digest = hashlib.sha256(f"{counter}:{text}".encode()).digest()
            for i in range(0, len(digest), 4):
                if len(vector) >= self.dimension:
                    break
                value = int.from_bytes(digest[i:i + 4], "big")
                # Map to [-1, 1]
                vector.append((value / (2**32)) * 2 - 1)
            counter += 1
        return vector

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models."""

    def __init__(self, model_name: str = "all-mpnet-base-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector using sentence transformers."""
        embedding = self.model.encode(text, convert_to_tensor=False)
        return embedding.tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            self._dimension = self.model.get_sentence_embedding_dimension()
        return self._dimension


@dataclass
class EmbeddingResult:
    text: str
    embedding: List[float]
    dimension: int
    from_cache: bool = False
    generated_at: datetime = field(default_factory=datetime.now)


@dataclass
class BatchEmbeddingResult:
    total: int
    successful: int
    failed: int
    results: List[EmbeddingResult]
    processing_time_ms: float
    errors: List[Dict[str, str]]


@dataclass
class EmbeddingStats:
    total_generated: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    cache_hit_rate: float = 0.0
    provider_calls: int = 0
    session_duration_ms: float = 0.0


class EmbeddingsService:
    """
    Validates text, consults the cache, calls the provider on a miss and
    checks the returned dimension before handing vectors to the vector layer.
    """

    def __init__(self, provider: IEmbeddingProvider, cache: Optional[EmbeddingCache] = None,
                 expected_dimension: Optional[int] = None):
        """
        Args:
            provider: Embedding provider to call on cache misses
            cache: Optional embedding cache; no caching when None
            expected_dimension: Dimension every vector must have; defaults to the provider's
        """
        self.provider = provider
        self.cache = cache
        if expected_dimension is None:
            expected_dimension = provider.get_dimension()
        elif expected_dimension < 1:
            raise InvalidInputError(f"Expected dimension must be >= 1, got {expected_dimension}")
        self.expected_dimension = expected_dimension
        self._stats = EmbeddingStats()
        self._session_start = time.monotonic()

    @staticmethod
    def _clean_text(text: str) -> str:
        if not isinstance(text, str) or not text:
            raise InvalidInputError("Text must be a non-empty string")
        trimmed = text.strip()
        if not trimmed:
            raise InvalidInputError("Text cannot be empty")
        if len(trimmed) > MAX_TEXT_LENGTH:
            raise InvalidInputError(f"Text exceeds maximum length of {MAX_TEXT_LENGTH} characters")
        return trimmed

    def _record_lookup(self, hit: bool) -> None:
        self._stats.total_generated += 1
        if hit:
            self._stats.cache_hits += 1
        else:
            self._stats.cache_misses += 1
        lookups = self._stats.cache_hits + self._stats.cache_misses
        self._stats.cache_hit_rate = self._stats.cache_hits / lookups

    def embed(self, text: str, force_refresh: bool = False) -> EmbeddingResult:
        """Embed one text, serving from cache unless force_refresh is set."""
        trimmed = self._clean_text(text)
        key = text_hash(trimmed)

        if self.cache is not None and not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                self._record_lookup(hit=True)
                logger.log_embedding(key, "cache_hit")
                return EmbeddingResult(text=trimmed, embedding=cached,
                                       dimension=len(cached), from_cache=True)

        self._record_lookup(hit=False)
        vector = list(self.provider.embed_text(trimmed))
        self._stats.provider_calls += 1

        if len(vector) != self.expected_dimension:
            raise DimensionMismatchError(
                f"Invalid embedding dimension: expected {self.expected_dimension}, got {len(vector)}",
                expected=self.expected_dimension, actual=len(vector))

        if self.cache is not None:
            self.cache.put(key, vector)
        logger.log_embedding(key, "generated", {"dimension": len(vector)})

        return EmbeddingResult(text=trimmed, embedding=vector, dimension=len(vector))

    def embed_text(self, text: str) -> list[float]:
        """Vector only; lets the service stand in wherever a provider is expected."""
        return self.embed(text).embedding

    def embed_batch(self, texts: List[str], batch_size: int = 10,
                    force_refresh: bool = False) -> BatchEmbeddingResult:
        """
        Embed many texts. A failing text is recorded in errors and does not abort the batch.

        Args:
            texts: Texts to embed
            batch_size: Texts processed per chunk
            force_refresh: Bypass the cache

        Returns:
            BatchEmbeddingResult with per-text results and errors
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")

        start = time.perf_counter()
        results = []
        errors = []

        for offset in range(0, len(texts), batch_size):
            for text in texts[offset:offset + batch_size]:
                try:
                    results.append(self.embed(text, force_refresh=force_refresh))
                except Exception as e:
                    errors.append({"text": str(text), "error": str(e) or type(e).__name__})

        if errors:
            logger.warning(f"Embedding batch finished with {len(errors)} failures out of {len(texts)}")

        return BatchEmbeddingResult(
            total=len(texts),
            successful=len(results),
            failed=len(errors),
            results=results,
            processing_time_ms=(time.perf_counter() - start) * 1000,
            errors=errors,
        )

    def get_dimension(self) -> int:
        return self.expected_dimension

    def get_stats(self) -> EmbeddingStats:
        """Snapshot of session statistics."""
        return EmbeddingStats(
            total_generated=self._stats.total_generated,
            cache_hits=self._stats.cache_hits,
            cache_misses=self._stats.cache_misses,
            cache_hit_rate=self._stats.cache_hit_rate,
            provider_calls=self._stats.provider_calls,
            session_duration_ms=(time.monotonic() - self._session_start) * 1000,
        )

    def reset_stats(self) -> None:
        self._stats = EmbeddingStats()
        self._session_start = time.monotonic()
