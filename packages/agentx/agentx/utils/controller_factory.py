"""Factory for wiring a training controller from configuration.

Keeps the assembly of environment, step engine, session and monitor out of
entrypoint scripts so they share one code path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from agentx.agent import StepEngine
from agentx.insight import InsightGenerator
from agentx.logging_config import logger
from agentx.monitoring import ConvergenceMonitor
from agentx.training import TrainingController, TrainingSession
from agentx.utils.config_loader import (
    SimulationConfig,
    configure_convergence,
    configure_environment,
    configure_insight,
    configure_reward,
    configure_session,
    configure_training,
)
from agentx.utils.seeding import ensure_seed, get_rng

if TYPE_CHECKING:
    from agentx.training import Scheduler


def setup_training_controller(
    config: SimulationConfig | None = None,
    scheduler: Scheduler | None = None,
    seed: int | None = None,
    *,
    enable_insight: bool = False,
) -> tuple[TrainingController, int]:
    """
    Build a ready-to-start controller.

    Args:
        config: Loaded configuration; all defaults when ``None``.
        scheduler: Tick driver; a wall-clock timer when ``None``.
        seed: Overrides the configured seed; a fresh one is drawn if neither is set.
        enable_insight: Attach an insight generator.

    Returns
    -------
        The controller and the seed its RNG was built from.
    """
    config = config or SimulationConfig()
    training_config = configure_training(config)
    session_config = configure_session(config)
    env_config = configure_environment(config)

    resolved_seed = ensure_seed(seed if seed is not None else session_config.seed)
    env = env_config.build()
    step_engine = StepEngine(
        env,
        reward_config=configure_reward(config),
        rng=get_rng(resolved_seed),
        log_probability=session_config.log_probability,
    )
    session = TrainingSession.create(
        start=env.start,
        patience=training_config.early_stopping_patience,
        log_capacity=session_config.log_capacity,
    )
    insight_generator = InsightGenerator(configure_insight(config)) if enable_insight else None

    logger.info(
        f"Controller ready: grid={env.grid_size}, target={env.target}, "
        f"obstacles={sorted(env.obstacles)}, seed={resolved_seed}",
    )
    controller = TrainingController(
        session,
        step_engine,
        config=training_config,
        monitor=ConvergenceMonitor(configure_convergence(config)),
        scheduler=scheduler,
        session_config=session_config,
        insight_generator=insight_generator,
    )
    return controller, resolved_seed
