"""
Environment-driven configuration for the FAQ retrieval library.
Values are read once at import; accessor functions re-read where tests need it.
"""

import os

# Embedding configuration
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sentence_transformers
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-mpnet-base-v2")
EMBED_DIM = int(os.getenv("EMBED_DIM", "384"))

# Embedding cache
EMBED_CACHE_MAX_ENTRIES = int(os.getenv("EMBED_CACHE_MAX_ENTRIES", "1024"))
EMBED_CACHE_TTL_SEC = int(os.getenv("EMBED_CACHE_TTL_SEC", str(30 * 24 * 60 * 60)))

# Vector store
VECTOR_PROVIDER = os.getenv("VECTOR_PROVIDER", "memory")  # memory|faiss

# Search behaviour
SEMANTIC_SEARCH_ENABLED = os.getenv("SEMANTIC_SEARCH_ENABLED", "true").lower() == "true"
SEMANTIC_SEARCH_MIN_SCORE = float(os.getenv("SEMANTIC_SEARCH_MIN_SCORE", "0.7"))
SEARCH_MAX_RESULTS = int(os.getenv("SEARCH_MAX_RESULTS", "10"))
SEARCH_LOG_MAX_ENTRIES = int(os.getenv("SEARCH_LOG_MAX_ENTRIES", "10000"))
FALLBACK_TO_KEYWORD_SEARCH = os.getenv("FALLBACK_TO_KEYWORD_SEARCH", "true").lower() != "false"

VERSION = "1.0.0"


def get_vector_store(dimension: int = None):
    """Get configured vector store implementation."""
    dimension = dimension or EMBED_DIM

    if VECTOR_PROVIDER == "faiss":
        from ..vector.faiss_store import FaissVectorStore
        return FaissVectorStore(dimension)

    from ..vector.index import SimpleInMemoryVectorStore
    return SimpleInMemoryVectorStore(dimension)


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    if EMBED_PROVIDER == "sentence_transformers":
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(EMBED_MODEL_NAME)

    from ..vector.embeddings import DeterministicHashEmbedding
    return DeterministicHashEmbedding(EMBED_DIM)


def get_embedding_cache():
    """Get an embedding cache sized from configuration."""
    from ..vector.cache import EmbeddingCache
    return EmbeddingCache(max_entries=EMBED_CACHE_MAX_ENTRIES, ttl_seconds=EMBED_CACHE_TTL_SEC)


def get_min_score():
    """Similarity threshold, read from the environment at call time."""
    return float(os.getenv("SEMANTIC_SEARCH_MIN_SCORE", str(SEMANTIC_SEARCH_MIN_SCORE)))


def get_max_results():
    """Default number of results per search, read from the environment at call time."""
    return int(os.getenv("SEARCH_MAX_RESULTS", str(SEARCH_MAX_RESULTS)))


def semantic_search_enabled():
    """Check if the semantic search path is enabled."""
    value = os.getenv("SEMANTIC_SEARCH_ENABLED")
    if value is None:
        return SEMANTIC_SEARCH_ENABLED
    return value.lower() == "true"


def keyword_fallback_enabled():
    """Check if keyword search runs when the semantic path yields nothing."""
    value = os.getenv("FALLBACK_TO_KEYWORD_SEARCH")
    if value is None:
        return FALLBACK_TO_KEYWORD_SEARCH
    return value.lower() != "false"


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if EMBED_PROVIDER not in ["hash", "sentence_transformers"]:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if VECTOR_PROVIDER not in ["memory", "faiss"]:
        issues.append(f"Invalid VECTOR_PROVIDER: {VECTOR_PROVIDER}")

    if EMBED_DIM < 1:
        issues.append("EMBED_DIM must be >= 1")

    if not -1.0 <= SEMANTIC_SEARCH_MIN_SCORE <= 1.0:
        issues.append("SEMANTIC_SEARCH_MIN_SCORE must be within [-1, 1]")

    if SEARCH_MAX_RESULTS < 1:
        issues.append("SEARCH_MAX_RESULTS must be >= 1")

    if SEARCH_LOG_MAX_ENTRIES < 1:
        issues.append("SEARCH_LOG_MAX_ENTRIES must be >= 1")

    if EMBED_CACHE_MAX_ENTRIES < 1:
        issues.append("EMBED_CACHE_MAX_ENTRIES must be >= 1")

    if EMBED_CACHE_TTL_SEC < 1:
        issues.append("EMBED_CACHE_TTL_SEC must be >= 1")

    return issues
