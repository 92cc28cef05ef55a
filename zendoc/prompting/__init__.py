"""Prompt construction for documentation drafts."""

from .builder import Prompt, PromptBuilder, language_for

__all__ = ["Prompt", "PromptBuilder", "language_for"]
