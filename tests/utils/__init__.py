"""
Test utilities for llvmenv testing.

This package provides a recording process runner and test data builders.
"""

from .builders import ConfigBuilder
from .mocks import RecordingRunner, mock_http_download

__all__ = [
    "ConfigBuilder",
    "RecordingRunner",
    "mock_http_download",
]
