"""
Ein Tsofia analysis core.

Structured video analysis, persona prompt configuration, derived analyses,
report-anchored chat and feedback aggregation on top of Google Gemini.
"""

__version__ = "0.4.0"
