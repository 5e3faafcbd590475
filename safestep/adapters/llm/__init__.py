"""Generative model adapters, in tier order."""

from safestep.adapters.llm.gemini import GeminiModel
from safestep.adapters.llm.groq import GroqModel

__all__ = ["GeminiModel", "GroqModel"]
