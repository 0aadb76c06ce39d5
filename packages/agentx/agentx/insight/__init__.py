"""Narrative insight generation for training runs."""

from agentx.insight.generator import InsightConfig, InsightGenerator, build_prompt

__all__ = [
    "InsightConfig",
    "InsightGenerator",
    "build_prompt",
]
