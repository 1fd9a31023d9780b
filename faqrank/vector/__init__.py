"""
Vector layer: similarity math, top-K selection, embeddings, caching and stores.
"""

# Package initialization for vector module
from .similarity import cosine_similarity, euclidean_distance
from .neighbors import find_most_similar, find_most_similar_records
from .index import IVectorStore, SimpleInMemoryVectorStore
from .faiss_store import FaissVectorStore
from .types import VectorRecord, QueryResult, SimilarityResult
from .cache import EmbeddingCache
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding, EmbeddingsService

__all__ = [
    'cosine_similarity',
    'euclidean_distance',
    'find_most_similar',
    'find_most_similar_records',
    'IVectorStore',
    'SimpleInMemoryVectorStore',
    'FaissVectorStore',
    'VectorRecord',
    'QueryResult',
    'SimilarityResult',
    'EmbeddingCache',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'EmbeddingsService'
]
