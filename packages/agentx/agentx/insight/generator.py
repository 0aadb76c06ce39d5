"""Narrative training insights from an external text-generation service.

The service is any OpenAI-compatible chat-completions endpoint; the default
points at Gemini's compatibility layer. Requests run in a worker thread so the
tick loop is never blocked, at most one request is in flight at a time, and
every failure degrades to a fixed user-visible message.
"""

from __future__ import annotations

import asyncio
import json
import os
import threading
from typing import TYPE_CHECKING

import requests
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from agentx.constants import MIN_EPISODES_FOR_INSIGHT
from agentx.errors import INSIGHT_EMPTY_RESPONSE, INSIGHT_UNAVAILABLE
from agentx.logging_config import logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from agentx.agent import MetricsPoint
    from agentx.training import TrainingConfig

HTTP_OK = 200

SYSTEM_INSTRUCTION = (
    "You are a senior Reinforcement Learning researcher. Your goal is to provide "
    "actionable insights for an autonomous agent's training loop."
)


class InsightConfig(BaseModel):
    """Configuration for the insight service.

    Attributes
    ----------
    base_url : str
        Root of the OpenAI-compatible API; ``/chat/completions`` is appended.
    model : str
        Model identifier sent with each request.
    api_key_env : str
        Environment variable holding the API key (``.env`` files are honoured).
    api_key : str | None
        Explicit key; takes precedence over the environment.
    temperature : float
        Sampling temperature.
    max_tokens : int
        Completion length cap.
    request_timeout_seconds : float
        HTTP timeout.
    history_window : int
        Number of most recent episodes included in the prompt.
    min_episodes : int
        Completed episodes required before a request is made.
    """

    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai"
    model: str = "gemini-2.5-flash"
    api_key_env: str = "GEMINI_API_KEY"
    api_key: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=512, ge=1)
    request_timeout_seconds: float = Field(default=60.0, gt=0.0)
    history_window: int = Field(default=20, ge=1)
    min_episodes: int = Field(default=MIN_EPISODES_FOR_INSIGHT, ge=1)


def build_prompt(metrics: Sequence[MetricsPoint], config: TrainingConfig, history_window: int) -> str:
    """Compose the analysis request for the latest ``history_window`` episodes."""
    recent = [point.model_dump() for point in metrics[-history_window:]]
    return (
        "As an AI Specialist for AgentX (an RL-powered autonomous agent), "
        "analyze the current training session:\n\n"
        f"Algorithm: {config.algorithm.value}\n"
        f"Learning Rate: {config.learning_rate}\n"
        f"Exploration Rate: {config.exploration_rate}\n\n"
        "Recent Metrics History:\n"
        f"{json.dumps(recent)}\n\n"
        "Provide a concise analysis (max 150 words) including:\n"
        "1. Performance trend (Is it learning or stagnating?).\n"
        "2. One specific hyperparameter adjustment suggestion.\n"
        "3. Potential risk (e.g., overfitting, vanishing rewards).\n\n"
        "Format the output in professional technical terms."
    )


class InsightGenerator:
    """Requests free-text commentary on a training run."""

    def __init__(self, config: InsightConfig | None = None) -> None:
        load_dotenv()
        self.config = config or InsightConfig()
        self._busy = threading.Lock()

    @property
    def busy(self) -> bool:
        """Whether a request is in flight."""
        return self._busy.locked()

    def _get_api_key(self) -> str | None:
        if self.config.api_key:
            return self.config.api_key
        return os.environ.get(self.config.api_key_env)

    async def generate(
        self,
        metrics: Sequence[MetricsPoint],
        config: TrainingConfig,
    ) -> str | None:
        """
        Generate commentary without blocking the caller's event loop.

        Returns
        -------
        str | None
            Commentary or a fallback message; ``None`` when fewer than
            ``min_episodes`` episodes are done or another request is running.
        """
        if len(metrics) < self.config.min_episodes:
            logger.info(
                f"Insight needs at least {self.config.min_episodes} completed episodes; "
                f"have {len(metrics)}",
            )
            return None

        if not self._busy.acquire(blocking=False):
            logger.info("Insight request already in flight; ignoring trigger")
            return None

        try:
            return await asyncio.to_thread(self.generate_sync, list(metrics), config)
        finally:
            self._busy.release()

    def generate_sync(self, metrics: Sequence[MetricsPoint], config: TrainingConfig) -> str:
        """Blocking request; never raises for service-side failures."""
        api_key = self._get_api_key()
        if not api_key:
            logger.error(
                f"Insight API key not found; set the '{self.config.api_key_env}' "
                "environment variable.",
            )
            return INSIGHT_UNAVAILABLE

        url = f"{self.config.base_url.rstrip('/')}/chat/completions"
        data = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {
                    "role": "user",
                    "content": build_prompt(metrics, config, self.config.history_window),
                },
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                url,
                headers=headers,
                data=json.dumps(data),
                timeout=self.config.request_timeout_seconds,
            )
        except requests.exceptions.RequestException as exc:
            logger.error(f"Insight request failed: {exc}")
            return INSIGHT_UNAVAILABLE

        if response.status_code != HTTP_OK:
            error_text = response.text[:200] if response.text else "Unknown error"
            logger.error(f"Insight API error ({response.status_code}): {error_text}")
            return INSIGHT_UNAVAILABLE

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error(f"Malformed insight response: {exc}")
            return INSIGHT_UNAVAILABLE

        if not content or not content.strip():
            return INSIGHT_EMPTY_RESPONSE
        return content.strip()
