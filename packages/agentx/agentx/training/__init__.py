"""Training session, lifecycle controller and tick drivers."""

__all__ = [
    "ManualScheduler",
    "RLAlgorithm",
    "Scheduler",
    "SessionConfig",
    "TimerScheduler",
    "TrainingConfig",
    "TrainingController",
    "TrainingSession",
]

from agentx.training.config import RLAlgorithm, SessionConfig, TrainingConfig
from agentx.training.controller import TrainingController
from agentx.training.scheduler import ManualScheduler, Scheduler, TimerScheduler
from agentx.training.session import TrainingSession
