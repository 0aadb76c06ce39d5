import pytest
from agentx.agent import StepEngine
from agentx.env import GridEnvironment
from agentx.training import (
    ManualScheduler,
    SessionConfig,
    TrainingConfig,
    TrainingController,
    TrainingSession,
)
from agentx.utils.seeding import get_rng


@pytest.fixture
def env():
    """Default 10x10 grid with target (8, 8) and three obstacles."""
    return GridEnvironment()


@pytest.fixture
def greedy_engine(env):
    """Step engine that never explores and never logs moves."""
    return StepEngine(env, rng=get_rng(42), log_probability=0.0)


@pytest.fixture
def make_controller(env):
    """Build a controller on a manual scheduler.

    Returns a factory taking TrainingConfig overrides and returning
    ``(controller, scheduler)``.
    """

    def _make(insight_generator=None, log_probability=0.0, seed=42, **overrides):
        config = TrainingConfig(
            **{"exploration_rate": 0.0, "early_stopping_patience": 3, **overrides},
        )
        scheduler = ManualScheduler()
        engine = StepEngine(env, rng=get_rng(seed), log_probability=log_probability)
        session = TrainingSession.create(
            start=env.start,
            patience=config.early_stopping_patience,
        )
        controller = TrainingController(
            session,
            engine,
            config=config,
            scheduler=scheduler,
            session_config=SessionConfig(tick_interval_ms=200),
            insight_generator=insight_generator,
        )
        return controller, scheduler

    return _make
