"""
FAQ records and search request/response models.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal

from .config import get_max_results


class FAQRecord(BaseModel):
    id: int
    question: str
    answer: str
    category: Optional[str] = None
    embedding: Optional[List[float]] = None
    helpful_ratio: Optional[float] = Field(default=None, ge=0, le=100)
    views: int = Field(default=0, ge=0)
    is_pinned: bool = False
    is_published: bool = True

    @field_validator('question')
    @classmethod
    def question_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('question cannot be empty')
        return v

    @property
    def vector_id(self) -> str:
        return f"faq-{self.id}"


class SearchRequest(BaseModel):
    query: str
    limit: int = Field(default_factory=get_max_results, ge=1, le=100, validate_default=True)
    min_score: Optional[float] = Field(default=None, ge=0, le=1)
    category: Optional[str] = None
    use_semantic_search: bool = True


class SearchResult(BaseModel):
    id: int
    question: str
    answer: str
    category: Optional[str] = None
    semantic_score: float
    relevance_score: float
    helpful_ratio: Optional[float] = None
    views: int = 0
    is_pinned: bool = False


class SearchResponse(BaseModel):
    success: bool
    results: List[SearchResult] = Field(default_factory=list)
    total_results: int = 0
    response_time_ms: float = 0.0
    method: Literal['semantic', 'keyword']
    fallback_used: bool = False
    search_id: Optional[int] = None
    error: Optional[str] = None


class TrendingResult(SearchResult):
    search_hits: int = 0
    search_clicks: int = 0


class SearchLogEntry(BaseModel):
    """One completed search, kept for click-through and fallback analytics."""
    id: int
    query: str
    method: Literal['semantic', 'keyword']
    result_count: int
    top_result_id: Optional[int] = None
    top_result_score: Optional[float] = None
    response_time_ms: float
    fallback_used: bool = False
    timestamp: float
    clicked_faq_id: Optional[int] = None
    clicked_position: Optional[int] = None


class SearchAnalytics(BaseModel):
    total_searches: int
    clicked_searches: int
    click_through_rate: float
    avg_response_time_ms: int
    fallback_count: int
    fallback_rate: float
    period_days: int
