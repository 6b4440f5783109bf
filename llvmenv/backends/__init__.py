"""
Build backends for llvmenv.
"""

from llvmenv.backends.base import BuildBackend
from llvmenv.backends.cmake import CMakeBackend

__all__ = ["BuildBackend", "CMakeBackend"]
