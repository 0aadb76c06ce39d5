"""Lifecycle controller driving the step engine and the convergence monitor."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from agentx.agent import AgentStatus, LogEntry, LogType, MetricsPoint, StepEngine, StepResult
from agentx.logging_config import logger
from agentx.monitoring import ConvergenceMonitor, StopDecision, StopReason
from agentx.training.config import SessionConfig, TrainingConfig
from agentx.training.scheduler import Scheduler, TimerScheduler
from agentx.training.session import TrainingSession

if TYPE_CHECKING:
    from types import TracebackType

    from agentx.insight import InsightGenerator

SessionListener = Callable[[TrainingSession], None]
EpisodeListener = Callable[[MetricsPoint], None]
StepListener = Callable[[StepResult], None]


class TrainingController:
    """
    Owns the tick loop of one training session.

    States move ``IDLE -> TRAINING`` on :meth:`start`, ``TRAINING -> IDLE`` on
    :meth:`stop`, ``TRAINING -> FINISHED`` when the convergence monitor fires,
    and anything ``-> IDLE`` with a full wipe on :meth:`reset`. Each tick is
    applied under a lock, so lifecycle calls from another thread never see a
    half-applied step.

    Parameters
    ----------
    session : TrainingSession
        State to drive.
    step_engine : StepEngine
        Per-tick transition function.
    config : TrainingConfig | None
        User knobs, read on every tick and every completed episode.
    monitor : ConvergenceMonitor | None
        Early-stopping detector.
    scheduler : Scheduler | None
        Tick driver; a wall-clock :class:`TimerScheduler` by default.
    session_config : SessionConfig | None
        Driver settings (tick interval).
    insight_generator : InsightGenerator | None
        Optional narrative commentary source.
    """

    def __init__(  # noqa: PLR0913
        self,
        session: TrainingSession,
        step_engine: StepEngine,
        config: TrainingConfig | None = None,
        monitor: ConvergenceMonitor | None = None,
        scheduler: Scheduler | None = None,
        session_config: SessionConfig | None = None,
        insight_generator: InsightGenerator | None = None,
    ) -> None:
        self.session = session
        self.step_engine = step_engine
        self.config = config or TrainingConfig()
        self.monitor = monitor or ConvergenceMonitor()
        self.scheduler = scheduler or TimerScheduler()
        self.session_config = session_config or SessionConfig()
        self.insight_generator = insight_generator

        self._lock = threading.RLock()
        self._listeners: list[SessionListener] = []
        self._episode_listeners: list[EpisodeListener] = []
        self._step_listeners: list[StepListener] = []
        # Bumped by reset so late insight results are dropped
        self._generation = 0

    # ------------------------------------------------------------------
    # Sinks
    # ------------------------------------------------------------------

    def add_listener(self, listener: SessionListener) -> None:
        """Call ``listener`` with the session after every applied tick and transition."""
        self._listeners.append(listener)

    def add_episode_listener(self, listener: EpisodeListener) -> None:
        """Call ``listener`` with each new metrics point as it is appended."""
        self._episode_listeners.append(listener)

    def add_step_listener(self, listener: StepListener) -> None:
        """Call ``listener`` with the result of every applied tick, after the session sinks."""
        self._step_listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self.session)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def status(self) -> AgentStatus:
        """Current lifecycle status."""
        return self.session.status

    def start(self) -> bool:
        """
        Begin or resume training.

        Starting from IDLE or FINISHED clears the stop reason and re-arms the
        convergence monitor; agent progress and metrics are kept.

        Returns
        -------
        bool
            False if training was already running.
        """
        with self._lock:
            if self.session.status == AgentStatus.TRAINING:
                return False
            self.session.stop_reason = None
            self.session.reset_convergence(self.config.early_stopping_patience)
            self.session.agent = self.session.agent.with_status(AgentStatus.TRAINING)
            logger.info(
                f"Training started at episode {self.session.agent.episode} "
                f"({self.config.algorithm.value}, epsilon={self.config.exploration_rate})",
            )

        self.scheduler.start(self.session_config.tick_interval_ms, self.tick)
        self._notify()
        return True

    def stop(self) -> bool:
        """
        Pause training, keeping all accumulated state.

        Returns
        -------
        bool
            False if training was not running.
        """
        with self._lock:
            if self.session.status != AgentStatus.TRAINING:
                return False
            self.session.agent = self.session.agent.with_status(AgentStatus.IDLE)
            logger.info(f"Training stopped manually at episode {self.session.agent.episode}")

        self.scheduler.cancel()
        self._notify()
        return True

    def reset(self) -> None:
        """Stop the driver and wipe the session back to a fresh idle state."""
        with self._lock:
            self.session.wipe(self.config.early_stopping_patience)
            self._generation += 1
            logger.info("Training session reset")

        self.scheduler.cancel()
        self._notify()

    def close(self) -> None:
        """Cancel any pending tick. Call on shutdown."""
        self.scheduler.cancel()

    def __enter__(self) -> TrainingController:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> StepResult | None:
        """
        Apply one step while training.

        If the step or a sink raises, training is halted (status back to
        IDLE, driver cancelled) before the error propagates, so a later
        :meth:`start` can resume.

        Returns
        -------
        StepResult | None
            The applied step, or ``None`` when not training.
        """
        decision: StopDecision | None = None
        try:
            with self._lock:
                if self.session.status != AgentStatus.TRAINING:
                    return None

                result = self.step_engine.step(self.session.agent, self.config.exploration_rate)
                self.session.agent = result.agent
                if result.log_entry is not None:
                    self.session.logs.add(result.log_entry)

                if result.metrics_point is not None:
                    self.session.metrics.append(result.metrics_point)
                    for listener in self._episode_listeners:
                        listener(result.metrics_point)
                    decision = self._evaluate_convergence()

            if decision is not None:
                self.scheduler.cancel()
            self._notify()
            for listener in self._step_listeners:
                listener(result)
        except Exception:
            logger.exception("Tick failed; halting training")
            self._halt()
            raise
        return result

    def _halt(self) -> None:
        """Leave TRAINING after a failed tick without notifying sinks."""
        with self._lock:
            if self.session.status == AgentStatus.TRAINING:
                self.session.agent = self.session.agent.with_status(AgentStatus.IDLE)
        self.scheduler.cancel()

    def _evaluate_convergence(self) -> StopDecision | None:
        """Run the monitor on the grown history and apply an auto-stop."""
        if not self.config.early_stopping or self.session.status != AgentStatus.TRAINING:
            return None

        decision = self.monitor.evaluate(
            self.session.convergence,
            self.session.rewards,
            self.config.early_stopping_patience,
        )
        if decision is None:
            return None

        self.session.agent = self.session.agent.with_status(AgentStatus.FINISHED)
        self.session.stop_reason = decision.reason
        self.session.logs.add(
            LogEntry(
                action="AUTO_STOP",
                reward=0.0,
                state=decision.reason.marker,
                type=LogType.WARNING
                if decision.reason is StopReason.DEGRADATION
                else LogType.SUCCESS,
            ),
        )
        logger.info(
            f"Auto-stopped after episode {self.session.metrics[-1].episode}: "
            f"{decision.reason.description} (avg={decision.avg_reward:.2f}, "
            f"improvement={decision.improvement:.2f})",
        )
        return decision

    # ------------------------------------------------------------------
    # Insight
    # ------------------------------------------------------------------

    async def generate_insight(self) -> str | None:
        """
        Ask the insight generator for commentary on the current run.

        Works from snapshots, so the tick loop keeps running meanwhile. The
        result is stored on the session unless it was reset in the meantime.

        Returns
        -------
        str | None
            The commentary, or ``None`` when no generator is configured, too
            few episodes are done, or a request is already in flight.
        """
        if self.insight_generator is None:
            return None

        with self._lock:
            metrics = list(self.session.metrics)
            config = self.config.model_copy()
            generation = self._generation

        text = await self.insight_generator.generate(metrics, config)
        if text is None:
            return None

        with self._lock:
            if generation == self._generation:
                self.session.insight = text
        return text
