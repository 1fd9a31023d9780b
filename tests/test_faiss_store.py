"""
Test cases for FaissVectorStore implementation.
"""

import pytest
import numpy as np
from faqrank.core.errors import DimensionMismatchError, InvalidInputError
from faqrank.vector import FaissVectorStore, VectorRecord


def one_hot(position, dimension=384):
    vector = np.zeros(dimension, dtype=np.float32)
    vector[position] = 1.0
    return vector


def test_faiss_store_initialization():
    """Test that FaissVectorStore can be initialized correctly."""
    store = FaissVectorStore(dimension=384)

    assert store.dimension == 384
    assert len(store) == 0


def test_faiss_store_add_single_record():
    """Test adding a single vector record to the FAISS store."""
    store = FaissVectorStore(dimension=384)

    store.add(VectorRecord(id="faq-1", vector=np.array([0.5] * 384, dtype=np.float32),
                           metadata={"faq_id": 1}))

    assert len(store) == 1
    assert "faq-1" in store.id_to_vector_index


def test_faiss_store_skips_zero_and_missing_vectors():
    """Zero vectors have no direction and are not indexed."""
    store = FaissVectorStore(dimension=384)

    store.batch_add([
        VectorRecord(id=f"faq-{i}", vector=np.array([float(i)] * 384, dtype=np.float32))
        for i in range(5)
    ] + [VectorRecord(id="pending", vector=None)])

    assert len(store) == 4
    assert "faq-0" not in store.id_to_vector_index
    assert "pending" not in store.id_to_vector_index


def test_faiss_store_search_ranks_by_cosine():
    store = FaissVectorStore(dimension=384)
    store.batch_add([
        VectorRecord(id="faq-1", vector=one_hot(0), metadata={"faq_id": 1}),
        VectorRecord(id="faq-2", vector=one_hot(192), metadata={"faq_id": 2}),
        VectorRecord(id="faq-3", vector=one_hot(0) + 0.5 * one_hot(192), metadata={"faq_id": 3}),
    ])

    results = store.search(one_hot(0), top_k=2)

    assert [r.id for r in results] == ["faq-1", "faq-3"]
    assert results[0].score == pytest.approx(1.0, abs=1e-6)
    assert results[1].score == pytest.approx(1 / np.sqrt(1.25), abs=1e-6)
    assert results[0].metadata == {"faq_id": 1}


def test_faiss_store_top_k_larger_than_index():
    store = FaissVectorStore(dimension=384)
    store.add(VectorRecord(id="faq-1", vector=one_hot(3)))

    assert len(store.search(one_hot(3), top_k=10)) == 1


def test_faiss_store_dimension_mismatch():
    store = FaissVectorStore(dimension=384)

    with pytest.raises(DimensionMismatchError):
        store.add(VectorRecord(id="faq-1", vector=np.ones(3)))

    store.add(VectorRecord(id="faq-2", vector=one_hot(1)))
    with pytest.raises(DimensionMismatchError):
        store.search(np.ones(3), top_k=1)


def test_faiss_store_rejects_duplicate_ids():
    store = FaissVectorStore(dimension=384)
    store.add(VectorRecord(id="faq-1", vector=one_hot(1)))

    with pytest.raises(InvalidInputError):
        store.add(VectorRecord(id="faq-1", vector=one_hot(2)))


def test_faiss_store_rejects_duplicate_ids_within_batch():
    store = FaissVectorStore(dimension=384)

    with pytest.raises(InvalidInputError, match="more than once"):
        store.batch_add([
            VectorRecord(id="faq-1", vector=one_hot(1)),
            VectorRecord(id="faq-1", vector=one_hot(2)),
        ])

    assert len(store) == 0
    assert store.search(one_hot(1), top_k=5) == []


def test_faiss_store_batch_with_bad_dimension_adds_nothing():
    store = FaissVectorStore(dimension=384)

    with pytest.raises(DimensionMismatchError):
        store.batch_add([
            VectorRecord(id="faq-1", vector=one_hot(1)),
            VectorRecord(id="faq-2", vector=np.ones(3)),
        ])

    assert len(store) == 0
    assert store.id_to_vector_index == {}


def test_faiss_store_clear():
    """Test clearing all records from the FAISS store."""
    store = FaissVectorStore(dimension=384)
    store.add(VectorRecord(id="faq-1", vector=np.array([0.5] * 384, dtype=np.float32)))
    assert len(store) == 1

    store.clear()

    assert len(store) == 0
    assert len(store.id_to_vector_index) == 0
    assert store.metadata == {}


def test_faiss_store_delete_not_implemented():
    """Test that delete operation raises NotImplementedError."""
    store = FaissVectorStore(dimension=384)

    with pytest.raises(NotImplementedError):
        store.delete("nonexistent_id")


def test_faiss_store_empty_search():
    """Test searching when the store is empty."""
    store = FaissVectorStore(dimension=384)

    assert store.search(one_hot(0), top_k=5) == []


def test_faiss_store_zero_query():
    store = FaissVectorStore(dimension=384)
    store.add(VectorRecord(id="faq-1", vector=one_hot(0)))

    assert store.search(np.zeros(384), top_k=5) == []
