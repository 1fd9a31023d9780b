"""
FAISS-backed vector store for large FAQ collections.
"""

from typing import List

import numpy as np

from ..core.errors import DimensionMismatchError, InvalidInputError
from ..util.logging import logger
from .index import IVectorStore
from .neighbors import check_top_k
from .similarity import Vector, as_vector
from .types import VectorRecord, QueryResult


class FaissVectorStore(IVectorStore):
    """FAISS-backed implementation of IVectorStore."""

    def __init__(self, dimension: int = 384):
        """
        Initialize FAISS vector store.

        Args:
            dimension: Dimension of the vectors (default: 384 for hash embeddings)
        """
        try:
            import faiss
        except ImportError:
            raise ImportError("FAISS not installed. Please install faiss-cpu package.")

        self.faiss = faiss
        self.dimension = dimension

        # Inner product over unit vectors is cosine similarity
        self.index = faiss.IndexFlatIP(dimension)

        self.id_to_vector_index = {}
        self.vector_id_map = {}  # Vector index -> record ID
        self.metadata = {}       # record ID -> metadata
        self.next_vector_index = 0

    def _normalized(self, vector: Vector, name: str):
        """Unit-length float32 row, or None for a zero vector."""
        array = as_vector(vector, name)
        if array.shape[0] != self.dimension:
            raise DimensionMismatchError(
                f"Vector dimension {array.shape[0]} does not match expected dimension {self.dimension}",
                expected=self.dimension, actual=array.shape[0])

        norm = np.linalg.norm(array)
        if norm == 0:
            return None
        return (array / norm).astype(np.float32).reshape(1, -1)

    def add(self, record: VectorRecord) -> None:
        """Add a single vector record to the FAISS store. Zero or missing vectors are skipped."""
        self.batch_add([record])

    def batch_add(self, records: List[VectorRecord]) -> None:
        """Add multiple vector records to the FAISS store. Nothing is added if any record is invalid."""
        rows = []
        valid_records = []
        seen = set()

        for record in records:
            if record.vector is None:
                continue
            if record.id in self.id_to_vector_index:
                raise InvalidInputError(f"Record {record.id} is already indexed; rebuild the index to replace it")
            if record.id in seen:
                raise InvalidInputError(f"Record {record.id} appears more than once in the batch")
            seen.add(record.id)
            row = self._normalized(record.vector, record.id)
            if row is None:
                logger.log_vector_operation("add", record.id, {"reason": "zero vector"}, status="skipped")
                continue
            rows.append(row)
            valid_records.append(record)

        if not rows:
            return

        self.index.add(np.vstack(rows))

        for i, record in enumerate(valid_records):
            self.id_to_vector_index[record.id] = self.next_vector_index + i
            self.vector_id_map[self.next_vector_index + i] = record.id
            self.metadata[record.id] = record.metadata

        self.next_vector_index += len(rows)
        logger.log_vector_operation("batch_add", valid_records[0].id, {"count": len(rows)})

    def search(self, query_vector: Vector, top_k: int = 5) -> List[QueryResult]:
        """Search for similar vectors and return ranked results."""
        check_top_k(top_k)
        if not self.index.ntotal or top_k == 0:
            return []

        query_row = self._normalized(query_vector, "query")
        if query_row is None:
            return []

        scores, indices = self.index.search(query_row, min(top_k, self.index.ntotal))

        query_results = []
        for score, vector_index in zip(scores[0], indices[0]):
            record_id = self.vector_id_map.get(int(vector_index))
            if record_id is None:
                continue
            query_results.append(QueryResult(
                id=record_id,
                score=min(max(float(score), -1.0), 1.0),
                metadata=self.metadata.get(record_id, {}),
            ))

        return query_results

    def delete(self, record_id: str) -> None:
        """FAISS flat indexes do not support deletion; rebuild the store instead."""
        raise NotImplementedError("FAISS vector store does not support direct deletion. "
                                  "Clear and re-add the remaining records instead.")

    def clear(self) -> None:
        """Clear all records from the FAISS store."""
        self.index = self.faiss.IndexFlatIP(self.dimension)
        self.id_to_vector_index.clear()
        self.vector_id_map.clear()
        self.metadata.clear()
        self.next_vector_index = 0

    def __len__(self) -> int:
        return self.index.ntotal
