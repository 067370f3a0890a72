"""
Prompt templates for the model calls.
"""

from eintsofia.services.llm.prompts.chat import EmmaChatPrompts
from eintsofia.services.llm.prompts.derived_analysis import DerivedAnalysisPrompts
from eintsofia.services.llm.prompts.personas import DEFAULT_PROMPTS
from eintsofia.services.llm.prompts.transcription import TranscriptionPrompts

__all__ = [
    "DEFAULT_PROMPTS",
    "DerivedAnalysisPrompts",
    "EmmaChatPrompts",
    "TranscriptionPrompts",
]
