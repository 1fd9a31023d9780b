"""
FAQ retrieval pipeline: embed query, nearest neighbours, relevance re-rank, keyword fallback.
Also keeps an in-process search log and per-FAQ hit and click counters for analytics.
"""

from collections import Counter, deque
import itertools
import threading
import time
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np

from ..util.logging import logger
from ..vector.embeddings import EmbeddingsService
from ..vector.index import IVectorStore
from ..vector.types import VectorRecord
from . import config as config_module
from .errors import InvalidInputError
from .relevance import calculate_relevance_score
from .schemas import (
    FAQRecord,
    SearchAnalytics,
    SearchLogEntry,
    SearchRequest,
    SearchResponse,
    SearchResult,
    TrendingResult,
)

KEYWORD_MATCH_SCORE = 0.5
SUGGESTED_SCORE = 0.9
TRENDING_SCORE = 0.95
MAX_KEYWORDS = 5
SECONDS_PER_DAY = 24 * 60 * 60

STOPWORDS = frozenset([
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'from', 'is', 'are', 'was', 'were', 'be', 'been',
    'being', 'have', 'has', 'had', 'do', 'does', 'did', 'will', 'would',
    'could', 'should', 'may', 'might', 'must', 'can', 'this', 'that',
    'these', 'those', 'i', 'you', 'he', 'she', 'it', 'we', 'they',
])


def extract_keywords(text: str) -> List[str]:
    """Lower-cased words longer than 3 characters that are not stopwords; first 5, de-duplicated."""
    words = [word for word in text.lower().split()
             if len(word) > 3 and word not in STOPWORDS][:MAX_KEYWORDS]
    return list(dict.fromkeys(words))


def faq_text(faq: FAQRecord) -> str:
    """Text embedded for an FAQ: question and answer together."""
    return f"{faq.question} {faq.answer}"


class FAQSearchService:
    """
    Ranks published FAQs for a free-text query.

    Semantic path: embed the query, fetch twice the requested number of
    neighbours, drop those under the similarity threshold, re-rank by
    calculate_relevance_score. Keyword path runs when the semantic path is
    disabled, fails or returns nothing.
    """

    def __init__(self, faqs: Iterable[FAQRecord], embeddings: EmbeddingsService,
                 vector_store: Optional[IVectorStore] = None, min_score: Optional[float] = None,
                 fallback_to_keyword: Optional[bool] = None, semantic_enabled: Optional[bool] = None,
                 max_log_entries: Optional[int] = None, clock: Callable[[], float] = time.time):
        self.embeddings = embeddings
        self.vector_store = vector_store if vector_store is not None else \
            config_module.get_vector_store(embeddings.get_dimension())
        self.min_score = min_score if min_score is not None else config_module.get_min_score()
        self.fallback_to_keyword = fallback_to_keyword if fallback_to_keyword is not None else \
            config_module.keyword_fallback_enabled()
        self.semantic_enabled = semantic_enabled if semantic_enabled is not None else \
            config_module.semantic_search_enabled()
        self._clock = clock
        self._faqs: Dict[int, FAQRecord] = {}

        self._lock = threading.Lock()
        self._search_ids = itertools.count(1)
        self._search_log = deque(maxlen=max_log_entries or config_module.SEARCH_LOG_MAX_ENTRIES)
        self._hits = Counter()    # faq id -> times ranked first
        self._clicks = Counter()  # faq id -> clicks from results

        self.index_faqs(faqs)

    def index_faqs(self, faqs: Iterable[FAQRecord], embed_missing: bool = False) -> int:
        """
        Register FAQs and add the published, embedded ones to the vector store.

        FAQs are registered only once the store has accepted the whole batch,
        so a bad vector leaves the service as it was.

        Args:
            faqs: FAQ records to register
            embed_missing: Embed question and answer for FAQs without a stored embedding

        Returns:
            Number of FAQs added to the vector store
        """
        faqs = list(faqs)
        records = []
        for faq in faqs:
            if not faq.is_published:
                continue
            embedding = faq.embedding
            if embedding is None and embed_missing:
                embedding = self.embeddings.embed_text(faq_text(faq))
            if embedding is None:
                continue
            records.append(VectorRecord(id=faq.vector_id, vector=np.asarray(embedding, dtype=np.float64),
                                        metadata={"faq_id": faq.id, "category": faq.category}))

        self.vector_store.batch_add(records)
        for faq in faqs:
            self._faqs[faq.id] = faq
        logger.info(f"Indexed {len(records)} FAQ embeddings ({len(self._faqs)} FAQs registered)")
        return len(records)

    @staticmethod
    def _to_result(faq: FAQRecord, semantic_score: float, relevance_score: float) -> SearchResult:
        return SearchResult(
            id=faq.id,
            question=faq.question,
            answer=faq.answer,
            category=faq.category,
            semantic_score=round(semantic_score, 3),
            relevance_score=relevance_score,
            helpful_ratio=faq.helpful_ratio,
            views=faq.views,
            is_pinned=faq.is_pinned,
        )

    def semantic_search(self, query: str, limit: int, min_score: Optional[float] = None,
                        category: Optional[str] = None) -> List[SearchResult]:
        """Semantic results ranked by relevance score. Provider and validation errors propagate."""
        threshold = self.min_score if min_score is None else min_score
        query_vector = self.embeddings.embed_text(query)
        neighbours = self.vector_store.search(query_vector, top_k=limit * 2)

        results = []
        for neighbour in neighbours:
            if neighbour.score < threshold:
                continue
            faq = self._faqs.get(neighbour.metadata.get("faq_id"))
            if faq is None or not faq.is_published:
                continue
            relevance = calculate_relevance_score(neighbour.score, faq.helpful_ratio,
                                                  faq.views, faq.is_pinned)
            results.append(self._to_result(faq, neighbour.score, relevance))

        results.sort(key=lambda r: r.relevance_score, reverse=True)
        results = results[:limit]
        if category:
            results = [r for r in results if r.category == category]
        return results

    def keyword_search(self, query: str, limit: int, category: Optional[str] = None) -> List[SearchResult]:
        """Published FAQs containing any query keyword, most viewed first."""
        keywords = extract_keywords(query)
        if not keywords:
            logger.warning("No valid keywords extracted")
            return []

        matches = []
        for faq in self._faqs.values():
            if not faq.is_published or (category and faq.category != category):
                continue
            haystack = f"{faq.question} {faq.answer}".lower()
            if any(keyword in haystack for keyword in keywords):
                matches.append(faq)

        matches.sort(key=lambda faq: faq.views, reverse=True)
        return [
            self._to_result(faq, KEYWORD_MATCH_SCORE, KEYWORD_MATCH_SCORE)
            for faq in matches[:limit]
        ]

    def search(self, request: SearchRequest) -> SearchResponse:
        """Run the full pipeline for one request and record it in the search log."""
        start = time.perf_counter()
        query = request.query.strip()
        if not query:
            return SearchResponse(success=False, method="semantic",
                                  response_time_ms=(time.perf_counter() - start) * 1000,
                                  error="Query cannot be empty")

        results: List[SearchResult] = []
        method = "semantic"
        fallback_used = False

        if request.use_semantic_search and self.semantic_enabled:
            try:
                results = self.semantic_search(query, request.limit, request.min_score, request.category)
            except Exception as e:
                logger.log_search_failure("semantic", e)
                if not self.fallback_to_keyword:
                    raise
            if not results:
                logger.warning("No semantic results found")

        if not results and (self.fallback_to_keyword or not request.use_semantic_search):
            results = self.keyword_search(query, request.limit, request.category)
            method = "keyword"
            # Keyword-only requests are not a fallback
            fallback_used = request.use_semantic_search

        duration_ms = (time.perf_counter() - start) * 1000
        logger.log_search(query, method, len(results), duration_ms, fallback_used)
        entry = self._record_search(query, method, results, duration_ms, fallback_used)

        return SearchResponse(
            success=True,
            results=results,
            total_results=len(results),
            response_time_ms=duration_ms,
            method=method,
            fallback_used=fallback_used,
            search_id=entry.id,
        )

    def _record_search(self, query: str, method: str, results: List[SearchResult],
                       duration_ms: float, fallback_used: bool) -> SearchLogEntry:
        top = results[0] if results else None
        with self._lock:
            entry = SearchLogEntry(
                id=next(self._search_ids),
                query=query,
                method=method,
                result_count=len(results),
                top_result_id=top.id if top else None,
                top_result_score=top.semantic_score if top else None,
                response_time_ms=duration_ms,
                fallback_used=fallback_used,
                timestamp=self._clock(),
            )
            self._search_log.append(entry)
            if top is not None:
                self._hits[top.id] += 1
        return entry

    def record_click(self, faq_id: int, position: int, search_id: Optional[int] = None) -> None:
        """
        Record a click on a search result.

        Args:
            faq_id: ID of the clicked FAQ
            position: 1-based position of the FAQ in the result list
            search_id: ID of the search that produced the result, from SearchResponse.search_id

        Raises:
            InvalidInputError: If the position is not positive, the FAQ is unknown,
                or the search is not in the log
        """
        if position < 1:
            raise InvalidInputError(f"Result position must be >= 1, got {position}")
        if faq_id not in self._faqs:
            raise InvalidInputError(f"Unknown FAQ: {faq_id}")

        with self._lock:
            if search_id is not None:
                entry = next((e for e in self._search_log if e.id == search_id), None)
                if entry is None:
                    raise InvalidInputError(f"Unknown search: {search_id}")
                entry.clicked_faq_id = faq_id
                entry.clicked_position = position
            self._clicks[faq_id] += 1

        logger.log_operation("record_click", "success",
                             {"faq_id": faq_id, "position": position, "search_id": search_id})

    def search_log(self) -> List[SearchLogEntry]:
        """Logged searches, oldest first."""
        with self._lock:
            return [entry.model_copy() for entry in self._search_log]

    def get_search_analytics(self, days: int = 30) -> SearchAnalytics:
        """Click-through rate, response time and fallback rate over the last `days` days."""
        if not 1 <= days <= 365:
            raise InvalidInputError(f"days must be within [1, 365], got {days}")

        since = self._clock() - days * SECONDS_PER_DAY
        with self._lock:
            entries = [entry for entry in self._search_log if entry.timestamp >= since]

        total = len(entries)
        clicked = sum(1 for entry in entries if entry.clicked_faq_id is not None)
        fallbacks = sum(1 for entry in entries if entry.fallback_used)
        avg_response = sum(entry.response_time_ms for entry in entries) / total if total else 0.0

        analytics = SearchAnalytics(
            total_searches=total,
            clicked_searches=clicked,
            click_through_rate=round(clicked / total * 100, 2) if total else 0.0,
            avg_response_time_ms=round(avg_response),
            fallback_count=fallbacks,
            fallback_rate=round(fallbacks / total * 100, 2) if total else 0.0,
            period_days=days,
        )
        logger.log_operation("search_analytics", "success",
                             {"total_searches": total, "ctr": analytics.click_through_rate})
        return analytics

    def get_suggested_faqs(self, category: Optional[str] = None, limit: int = 5) -> List[SearchResult]:
        """Published FAQs to suggest before a search: pinned first, then most clicked, then most viewed."""
        if not 1 <= limit <= 10:
            raise InvalidInputError(f"limit must be within [1, 10], got {limit}")

        candidates = [faq for faq in self._faqs.values()
                      if faq.is_published and (not category or faq.category == category)]
        candidates.sort(key=lambda faq: (faq.is_pinned, self._clicks[faq.id], faq.views), reverse=True)
        return [self._to_result(faq, SUGGESTED_SCORE, SUGGESTED_SCORE) for faq in candidates[:limit]]

    def get_trending_faqs(self, limit: int = 10) -> List[TrendingResult]:
        """Most viewed published FAQs, ties broken by helpful ratio, with their search counters."""
        if not 1 <= limit <= 100:
            raise InvalidInputError(f"limit must be within [1, 100], got {limit}")

        candidates = [faq for faq in self._faqs.values() if faq.is_published]
        candidates.sort(key=lambda faq: (faq.views, faq.helpful_ratio or 0.0), reverse=True)
        return [
            TrendingResult(
                **self._to_result(faq, TRENDING_SCORE, TRENDING_SCORE).model_dump(),
                search_hits=self._hits[faq.id],
                search_clicks=self._clicks[faq.id],
            )
            for faq in candidates[:limit]
        ]
