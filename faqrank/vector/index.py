"""
Vector store interface and the in-memory implementation.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.errors import DimensionMismatchError
from ..util.logging import logger
from .neighbors import find_most_similar_records
from .similarity import Vector, as_vector
from .types import VectorRecord, QueryResult


class IVectorStore(ABC):
    """Abstract interface for vector storage operations."""

    @abstractmethod
    def add(self, record: VectorRecord) -> None:
        """Add a single vector record to the store."""
        pass

    @abstractmethod
    def batch_add(self, records: List[VectorRecord]) -> None:
        """Add multiple vector records to the store."""
        pass

    @abstractmethod
    def search(self, query_vector: Vector, top_k: int = 5) -> List[QueryResult]:
        """Search for similar vectors and return ranked results."""
        pass

    @abstractmethod
    def delete(self, record_id: str) -> None:
        """Delete a vector record by ID."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all records from the store."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class SimpleInMemoryVectorStore(IVectorStore):
    """In-memory store; search is an exact top-K scan by cosine similarity."""

    def __init__(self, dimension: Optional[int] = None):
        """
        Args:
            dimension: Required vector dimension; fixed by the first record when None
        """
        self.dimension = dimension
        self._records = {}  # record_id -> VectorRecord, insertion ordered

    def _check_dimension(self, size: int) -> None:
        if self.dimension is not None and size != self.dimension:
            raise DimensionMismatchError(
                f"Vector dimension {size} does not match expected dimension {self.dimension}",
                expected=self.dimension, actual=size)

    def _prepared(self, record: VectorRecord, dimension: Optional[int]) -> VectorRecord:
        if record.vector is None:
            return record
        vector = as_vector(record.vector, record.id)
        if dimension is not None and vector.shape[0] != dimension:
            raise DimensionMismatchError(
                f"Vector dimension {vector.shape[0]} does not match expected dimension {dimension}",
                expected=dimension, actual=vector.shape[0])
        return VectorRecord(id=record.id, vector=vector, metadata=record.metadata)

    def add(self, record: VectorRecord) -> None:
        """Add or replace a record. Records without a vector are kept but never matched."""
        self.batch_add([record])

    def batch_add(self, records: List[VectorRecord]) -> None:
        """Add or replace records. Nothing is stored if any record is invalid."""
        dimension = self.dimension
        prepared = []
        for record in records:
            record = self._prepared(record, dimension)
            if dimension is None and record.vector is not None:
                dimension = record.vector.shape[0]
            prepared.append(record)

        self.dimension = dimension
        for record in prepared:
            self._records[record.id] = record
            logger.log_vector_operation("add", record.id)

    def search(self, query_vector: Vector, top_k: int = 5) -> List[QueryResult]:
        """Search for similar vectors and return ranked results."""
        if not self._records:
            return []
        query = as_vector(query_vector, "query")
        self._check_dimension(query.shape[0])
        return find_most_similar_records(query, list(self._records.values()), top_k)

    def delete(self, record_id: str) -> None:
        """Delete a vector record by ID. Unknown IDs are ignored."""
        if self._records.pop(record_id, None) is not None:
            logger.log_vector_operation("delete", record_id)

    def clear(self) -> None:
        """Clear all records from the store."""
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
