"""
Configuration accessors and factories.
"""

import pytest
from pydantic import ValidationError

from faqrank.core import config
from faqrank.core.schemas import SearchRequest
from faqrank.vector.cache import EmbeddingCache
from faqrank.vector.embeddings import DeterministicHashEmbedding, SentenceTransformerEmbedding
from faqrank.vector.faiss_store import FaissVectorStore
from faqrank.vector.index import SimpleInMemoryVectorStore


def test_default_config_is_valid():
    assert config.validate_config() == []


def test_validate_config_reports_issues(monkeypatch):
    monkeypatch.setattr(config, "VECTOR_PROVIDER", "pinecone")
    monkeypatch.setattr(config, "SEMANTIC_SEARCH_MIN_SCORE", 1.5)
    monkeypatch.setattr(config, "EMBED_DIM", 0)

    issues = config.validate_config()

    assert "Invalid VECTOR_PROVIDER: pinecone" in issues
    assert "SEMANTIC_SEARCH_MIN_SCORE must be within [-1, 1]" in issues
    assert "EMBED_DIM must be >= 1" in issues


def test_memory_store_by_default(monkeypatch):
    monkeypatch.setattr(config, "VECTOR_PROVIDER", "memory")
    store = config.get_vector_store(16)

    assert isinstance(store, SimpleInMemoryVectorStore)
    assert store.dimension == 16


def test_faiss_store(monkeypatch):
    monkeypatch.setattr(config, "VECTOR_PROVIDER", "faiss")
    store = config.get_vector_store(32)

    assert isinstance(store, FaissVectorStore)
    assert store.dimension == 32


def test_hash_provider_by_default(monkeypatch):
    monkeypatch.setattr(config, "EMBED_PROVIDER", "hash")
    monkeypatch.setattr(config, "EMBED_DIM", 64)

    provider = config.get_embedding_provider()

    assert isinstance(provider, DeterministicHashEmbedding)
    assert provider.get_dimension() == 64


def test_sentence_transformer_provider_is_lazy(monkeypatch):
    monkeypatch.setattr(config, "EMBED_PROVIDER", "sentence_transformers")
    monkeypatch.setattr(config, "EMBED_MODEL_NAME", "all-MiniLM-L6-v2")

    provider = config.get_embedding_provider()

    assert isinstance(provider, SentenceTransformerEmbedding)
    assert provider.model_name == "all-MiniLM-L6-v2"
    assert provider._model is None


def test_embedding_cache(monkeypatch):
    monkeypatch.setattr(config, "EMBED_CACHE_MAX_ENTRIES", 5)
    cache = config.get_embedding_cache()

    assert isinstance(cache, EmbeddingCache)
    assert cache.max_entries == 5


@pytest.mark.parametrize("value,expected", [("true", True), ("false", False), ("TRUE", True)])
def test_semantic_search_enabled(monkeypatch, value, expected):
    monkeypatch.setenv("SEMANTIC_SEARCH_ENABLED", value)
    assert config.semantic_search_enabled() is expected


def test_keyword_fallback_enabled(monkeypatch):
    monkeypatch.setenv("FALLBACK_TO_KEYWORD_SEARCH", "false")
    assert config.keyword_fallback_enabled() is False
    monkeypatch.delenv("FALLBACK_TO_KEYWORD_SEARCH")
    assert config.keyword_fallback_enabled() is True


def test_min_score_from_environment(monkeypatch):
    monkeypatch.setenv("SEMANTIC_SEARCH_MIN_SCORE", "0.55")
    assert config.get_min_score() == 0.55


def test_max_results_sets_default_search_limit(monkeypatch):
    monkeypatch.setenv("SEARCH_MAX_RESULTS", "3")
    assert config.get_max_results() == 3
    assert SearchRequest(query="refund").limit == 3
    assert SearchRequest(query="refund", limit=7).limit == 7


def test_max_results_default(monkeypatch):
    monkeypatch.delenv("SEARCH_MAX_RESULTS", raising=False)
    monkeypatch.setattr(config, "SEARCH_MAX_RESULTS", 4)
    assert SearchRequest(query="refund").limit == 4


def test_out_of_range_max_results_is_rejected(monkeypatch):
    monkeypatch.setenv("SEARCH_MAX_RESULTS", "500")
    with pytest.raises(ValidationError):
        SearchRequest(query="refund")


def test_flags_fall_back_to_import_time_values(monkeypatch):
    monkeypatch.delenv("SEMANTIC_SEARCH_ENABLED", raising=False)
    monkeypatch.delenv("FALLBACK_TO_KEYWORD_SEARCH", raising=False)
    monkeypatch.setattr(config, "SEMANTIC_SEARCH_ENABLED", False)
    monkeypatch.setattr(config, "FALLBACK_TO_KEYWORD_SEARCH", False)

    assert config.semantic_search_enabled() is False
    assert config.keyword_fallback_enabled() is False


def test_version_is_exported():
    import faqrank
    assert faqrank.__version__ == config.VERSION
