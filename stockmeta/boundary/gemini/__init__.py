"""Gemini vision boundary for stock metadata generation."""

from stockmeta.boundary.gemini.analysis_client import (
    AnalysisClient,
    GeminiAnalysisClient,
    parse_analysis_text,
)

__all__ = ["AnalysisClient", "GeminiAnalysisClient", "parse_analysis_text"]
