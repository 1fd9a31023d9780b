"""
Record and result types shared by the similarity, neighbor and store layers.
"""

from typing import Dict, Optional
import numpy as np
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SimilarityResult:
    """Position of a candidate in the input sequence and its cosine similarity."""

    index: int
    """Zero-based position of the candidate in the input sequence"""

    score: float
    """Cosine similarity to the query, in [-1, 1]"""


@dataclass
class VectorRecord:
    """Represents a stored vector keyed by an external identifier."""

    id: str
    """Unique identifier, e.g. "faq-42" """

    vector: Optional[np.ndarray]
    """Embedding of the record's text; None when not yet embedded"""

    metadata: Dict[str, object] = field(default_factory=dict)
    """Additional metadata carried through to query results"""


@dataclass
class QueryResult:
    """Represents a search result from a vector store."""

    id: str
    """Identifier of the matching record"""

    score: float
    """Cosine similarity of the match"""

    metadata: Dict[str, object] = field(default_factory=dict)
    """Metadata associated with the matched record"""
