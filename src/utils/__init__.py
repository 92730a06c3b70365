"""Utility modules for the temperature calendar pipeline."""

from src.utils.retry import (
    bom_retry,
    create_retry_decorator,
    is_retryable_error,
)

__all__ = [
    "bom_retry",
    "create_retry_decorator",
    "is_retryable_error",
]
