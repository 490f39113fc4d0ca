"""
Workers Module - Run Orchestration
==================================
Ties the core together into a single load -> blend -> save run.

Components:
- BlendWorker: one watermarking run, reported as a BlendResult
"""

from .blend_worker import BlendWorker, BlendConfig, BlendResult

__all__ = [
    "BlendWorker",
    "BlendConfig",
    "BlendResult",
]
