"""
relay_processor - Fit service for relay zone characteristics

This package runs fitting jobs: a job YAML (current zone settings, labeled
fault points, search configuration) goes in, a FitResultMessage comes out.

Architecture:
- FitService: Job orchestrator (synchronous or one worker thread)
- JobConfig: Configuration management

Threading Model:
- Caller thread (run) or one daemon worker thread (start/wait)
"""

from relay_processor.config import JobConfig
from relay_processor.service import FitService

__all__ = [
    "JobConfig",
    "FitService",
]
