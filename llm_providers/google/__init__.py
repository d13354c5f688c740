"""
Google Provider Package.

This package provides integration with Google's Gemini models.
"""

from .gemini_provider import (
    GoogleProvider,
    create_google_provider,
    build_gemini_history,
    normalize_model_name
)

__all__ = [
    "GoogleProvider",
    "create_google_provider",
    "build_gemini_history",
    "normalize_model_name"
]
