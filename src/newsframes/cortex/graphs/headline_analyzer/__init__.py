"""Headline analyzer: anonymize, analyze in parallel, synthesize, revert, save."""

from .graph import HeadlineAnalyzer, build_headline_pipeline
from .state import ANALYSIS_FIELDS, HEADLINE_CHANNELS

__all__ = ["HeadlineAnalyzer", "build_headline_pipeline", "ANALYSIS_FIELDS", "HEADLINE_CHANNELS"]
