"""Prompts module."""

from .builder import (
    build_evaluation_prompt,
    build_infrastructure_prompt,
    build_prompt,
    build_raw_prompt,
    build_structured_prompt,
)

__all__ = [
    "build_prompt",
    "build_raw_prompt",
    "build_structured_prompt",
    "build_evaluation_prompt",
    "build_infrastructure_prompt",
]
