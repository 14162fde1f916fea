"""
Workflows module - Pipeline orchestration for digest generation.
"""
from workflows.base import DigestPipeline
from workflows.up_ahead import UpAheadPipeline, build_digest

__all__ = [
    "DigestPipeline",
    "UpAheadPipeline",
    "build_digest",
]
