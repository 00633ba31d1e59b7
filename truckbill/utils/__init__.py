"""Utility functions and helpers."""

from truckbill.utils.request_retry import RequestRetryConfig, get_read_retrying

__all__ = [
    "RequestRetryConfig",
    "get_read_retrying",
]
