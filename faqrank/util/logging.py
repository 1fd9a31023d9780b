"""
Structured operation logging for embedding, cache, vector store and search events.
"""

import logging
from typing import Any, Dict


class StructuredLogger:
    """Structured logger for retrieval operations."""

    def __init__(self, name: str = "faqrank"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_embedding(self, text_hash: str, status: str, details: Dict[str, Any] = None):
        """Log an embedding lookup or generation. Only the text hash is logged, never the text."""
        log_details = {"text_hash": text_hash[:12]}
        if details:
            log_details.update(details)

        self.log_operation("embedding.generate", status, log_details)

    def log_cache_eviction(self, reason: str, count: int):
        """Log entries dropped from the embedding cache."""
        self.log_operation("cache.evict", "success", {"reason": reason, "count": count})

    def log_vector_operation(self, operation: str, record_id: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log a vector store operation."""
        log_details = {"record_id": record_id}
        if details:
            log_details.update(details)

        self.log_operation(f"vector.{operation}", status, log_details)

    def log_search(self, query: str, method: str, result_count: int, duration_ms: float,
                   fallback_used: bool = False, status: str = "success"):
        """Log a completed search request."""
        log_details = {
            "query": query[:50] + "..." if len(query) > 50 else query,
            "method": method,
            "result_count": result_count,
            "duration_ms": round(duration_ms, 2),
            "fallback_used": fallback_used,
        }
        self.log_operation("search", status, log_details)

    def log_search_failure(self, method: str, error: Exception):
        """Log a failed search path; the caller decides whether to fall back."""
        log_details = {
            "method": method,
            "error_type": type(error).__name__,
            "error": str(error)[:100],
        }
        self.log_operation(f"search.{method}", "failed", log_details, level=logging.ERROR)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()
