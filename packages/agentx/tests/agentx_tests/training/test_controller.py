"""Tests for the training lifecycle controller."""

import asyncio
import time
from unittest.mock import AsyncMock, Mock

import pytest
from agentx.agent import AgentStatus, LogType, MetricsPoint, StepEngine, StepResult
from agentx.monitoring import NO_BASELINE, ConvergenceMonitor, StopDecision, StopReason
from agentx.training import (
    SessionConfig,
    TimerScheduler,
    TrainingConfig,
    TrainingController,
    TrainingSession,
)
from agentx.utils.seeding import get_rng
from pydantic import ValidationError

# With no exploration each episode is 8 moves right then 8 moves down
EPISODE_TICKS = 16
EPISODE_REWARD = 15 * 0.9 + 100.0


def _run_until_idle(scheduler, limit=10_000):
    ticks = 0
    while scheduler.fire():
        ticks += 1
        assert ticks < limit
    return ticks


class TestLifecycle:
    """Test start, stop and reset transitions."""

    def test_start(self, make_controller):
        """Test that start moves IDLE to TRAINING and arms the scheduler."""
        controller, scheduler = make_controller()

        assert controller.start() is True
        assert controller.status == AgentStatus.TRAINING
        assert scheduler.running
        assert scheduler.interval_ms == 200

    def test_start_while_training_is_noop(self, make_controller):
        """Test that a second start does nothing."""
        controller, _ = make_controller()
        controller.start()
        assert controller.start() is False
        assert controller.status == AgentStatus.TRAINING

    def test_tick_when_idle_does_nothing(self, make_controller):
        """Test that ticks outside TRAINING are ignored."""
        controller, _ = make_controller()
        assert controller.tick() is None
        assert controller.session.agent.position == (0, 0)

    def test_stop_keeps_progress(self, make_controller):
        """Test that a manual stop pauses without losing state."""
        controller, scheduler = make_controller()
        controller.start()
        for _ in range(10):
            scheduler.fire()

        assert controller.stop() is True
        assert controller.status == AgentStatus.IDLE
        assert controller.session.agent.position == (8, 2)
        assert not scheduler.running
        assert controller.stop() is False
        assert controller.tick() is None

    def test_resume_after_stop(self, make_controller):
        """Test that training resumes where it was stopped."""
        controller, scheduler = make_controller()
        controller.start()
        for _ in range(10):
            scheduler.fire()
        controller.stop()

        controller.start()
        scheduler.fire()
        assert controller.session.agent.position == (8, 3)

    def test_reset_wipes_session(self, make_controller):
        """Test that reset returns to a fresh idle session."""
        controller, scheduler = make_controller(log_probability=1.0)
        controller.start()
        for _ in range(EPISODE_TICKS + 3):
            scheduler.fire()
        controller.session.insight = "stale"

        controller.reset()

        session = controller.session
        assert session.status == AgentStatus.IDLE
        assert session.agent.position == (0, 0)
        assert session.agent.episode == 1
        assert session.agent.total_reward == 0.0
        assert session.metrics == []
        assert len(session.logs) == 0
        assert session.stop_reason is None
        assert session.insight is None
        assert not scheduler.running

    def test_reset_restores_identical_behavior(self, make_controller):
        """Test that a reset run replays the first run."""
        controller, scheduler = make_controller()
        controller.start()
        first = [controller.tick().agent.position for _ in range(40)]

        controller.reset()
        controller.start()
        second = [controller.tick().agent.position for _ in range(40)]

        assert first == second

    def test_reset_after_finish_replays_convergence(self, make_controller):
        """Test that reset re-arms the monitor and the same run converges again."""
        controller, scheduler = make_controller()
        controller.start()
        first_ticks = _run_until_idle(scheduler)
        assert controller.session.convergence.patience_left == 0

        controller.reset()

        convergence = controller.session.convergence
        assert convergence.patience_left == 3
        assert convergence.best_avg_reward == NO_BASELINE
        assert convergence.avg_reward is None
        assert not convergence.has_baseline

        controller.start()
        second_ticks = _run_until_idle(scheduler)

        session = controller.session
        assert second_ticks == first_ticks == 8 * EPISODE_TICKS
        assert session.status == AgentStatus.FINISHED
        assert session.stop_reason == StopReason.CONVERGENCE
        assert len(session.metrics) == 8
        assert session.agent.episode == 9
        assert session.convergence.patience_left == 0

    def test_context_manager_cancels(self, make_controller):
        """Test that leaving the context cancels the scheduler."""
        controller, scheduler = make_controller()
        with controller:
            controller.start()
        assert not scheduler.running


class TestTraining:
    """Test ticks, episodes and automatic stopping."""

    def test_one_episode(self, make_controller):
        """Test that one greedy episode takes 16 ticks and records one metrics point."""
        controller, scheduler = make_controller()
        controller.start()

        assert scheduler.advance(200 * EPISODE_TICKS) == EPISODE_TICKS

        session = controller.session
        assert len(session.metrics) == 1
        assert session.metrics[0].episode == 1
        assert session.metrics[0].reward == pytest.approx(EPISODE_REWARD)
        assert session.agent.episode == 2
        assert session.agent.position == (0, 0)
        assert session.agent.total_reward == 0.0

    def test_converges(self, make_controller):
        """Test that identical episodes finish training after patience runs out."""
        controller, scheduler = make_controller()
        controller.start()

        ticks = _run_until_idle(scheduler)

        session = controller.session
        assert ticks == 8 * EPISODE_TICKS
        assert session.status == AgentStatus.FINISHED
        assert session.stop_reason == StopReason.CONVERGENCE
        assert len(session.metrics) == 8
        assert session.agent.episode == 9
        assert session.convergence.patience_left == 0
        assert session.avg_reward == pytest.approx(EPISODE_REWARD)
        assert not scheduler.running

        auto_stop = session.logs.entries[0]
        assert auto_stop.action == "AUTO_STOP"
        assert auto_stop.state == "CONVERGED"
        assert auto_stop.reward == 0.0
        assert auto_stop.type == LogType.SUCCESS

    def test_restart_after_finish_rearms_monitor(self, make_controller):
        """Test that starting from FINISHED clears the stop and keeps the history."""
        controller, scheduler = make_controller()
        controller.start()
        _run_until_idle(scheduler)

        assert controller.start() is True

        session = controller.session
        assert session.status == AgentStatus.TRAINING
        assert session.stop_reason is None
        assert session.convergence.patience_left == 3
        assert not session.convergence.has_baseline
        assert len(session.metrics) == 8

    def test_early_stopping_disabled(self, make_controller):
        """Test that training keeps going without early stopping."""
        controller, scheduler = make_controller(early_stopping=False)
        controller.start()

        scheduler.advance(200 * EPISODE_TICKS * 12)

        assert controller.status == AgentStatus.TRAINING
        assert len(controller.session.metrics) == 12
        assert controller.session.stop_reason is None

    def test_degradation_stop(self, env):
        """Test the auto-stop log entry for a degradation."""
        monitor = Mock(spec=ConvergenceMonitor)
        monitor.evaluate.return_value = StopDecision(
            reason=StopReason.DEGRADATION,
            improvement=-7.0,
            avg_reward=3.0,
        )
        engine = StepEngine(env, rng=get_rng(0), log_probability=0.0)
        controller = TrainingController(
            TrainingSession.create(),
            engine,
            config=TrainingConfig(exploration_rate=0.0),
            monitor=monitor,
            scheduler=Mock(),
        )
        controller.start()
        for _ in range(EPISODE_TICKS):
            controller.tick()

        assert controller.status == AgentStatus.FINISHED
        assert controller.session.stop_reason == StopReason.DEGRADATION
        entry = controller.session.logs.entries[0]
        assert entry.state == "DEGRADATION"
        assert entry.type == LogType.WARNING
        controller.scheduler.cancel.assert_called()

    def test_monitor_runs_once_per_episode(self, env):
        """Test that the monitor is consulted only when an episode completes."""
        monitor = Mock(spec=ConvergenceMonitor)
        monitor.evaluate.return_value = None
        engine = StepEngine(env, rng=get_rng(0), log_probability=0.0)
        controller = TrainingController(
            TrainingSession.create(),
            engine,
            config=TrainingConfig(exploration_rate=0.0),
            monitor=monitor,
            scheduler=Mock(),
        )
        controller.start()
        for _ in range(EPISODE_TICKS * 2):
            controller.tick()

        assert monitor.evaluate.call_count == 2

    def test_config_change_applies_next_tick(self, make_controller):
        """Test that exploration changes are picked up without a restart."""
        controller, scheduler = make_controller()
        controller.start()
        scheduler.fire()

        controller.config.exploration_rate = 1.0
        result = controller.tick()
        assert result.explored is True

    def test_invalid_config_assignment_rejected(self, make_controller):
        """Test that out-of-range knobs are rejected on assignment."""
        controller, _ = make_controller()
        with pytest.raises(ValidationError):
            controller.config.exploration_rate = 1.5
        with pytest.raises(ValidationError):
            controller.config.early_stopping_patience = 0

    def test_listeners(self, make_controller):
        """Test that sinks see every tick and every completed episode."""
        controller, scheduler = make_controller()
        snapshots = []
        episodes = []
        controller.add_listener(lambda session: snapshots.append(session.agent.position))
        controller.add_episode_listener(episodes.append)
        controller.start()

        scheduler.advance(200 * EPISODE_TICKS)

        # One notification for start plus one per tick
        assert len(snapshots) == EPISODE_TICKS + 1
        assert len(episodes) == 1
        assert isinstance(episodes[0], MetricsPoint)

    def test_step_listener_sees_only_ticks(self, make_controller):
        """Test that step listeners fire once per applied tick, not on transitions."""
        controller, scheduler = make_controller()
        steps = []
        controller.add_step_listener(steps.append)

        controller.start()
        for _ in range(5):
            scheduler.fire()
        controller.stop()
        controller.reset()

        assert len(steps) == 5
        assert all(isinstance(step, StepResult) for step in steps)
        assert steps[-1].agent.position == (5, 0)


class TestTickFailure:
    """Test that a failing tick leaves training in a restartable state."""

    def test_failing_listener_halts_training(self, make_controller):
        """Test that a raising sink moves the session back to IDLE."""
        controller, scheduler = make_controller()
        calls = []

        def listener(session):
            calls.append(session.agent.position)
            if len(calls) == 3:
                raise RuntimeError("sink failed")

        controller.add_listener(listener)
        controller.start()
        scheduler.fire()

        with pytest.raises(RuntimeError, match="sink failed"):
            scheduler.fire()

        assert controller.status == AgentStatus.IDLE
        assert controller.session.agent.position == (2, 0)
        assert not scheduler.running

        assert controller.start() is True
        scheduler.fire()
        assert controller.session.agent.position == (3, 0)

    def test_failing_step_halts_training(self, make_controller):
        """Test that an exception from the step engine halts training."""
        controller, scheduler = make_controller()
        controller.step_engine = Mock(spec=StepEngine)
        controller.step_engine.step.side_effect = ValueError("bad step")
        controller.start()

        with pytest.raises(ValueError, match="bad step"):
            scheduler.fire()

        assert controller.status == AgentStatus.IDLE
        assert controller.session.agent.position == (0, 0)
        assert not scheduler.running

    @pytest.mark.filterwarnings("ignore::pytest.PytestUnhandledThreadExceptionWarning")
    def test_failing_listener_on_timer(self, env):
        """Test that a timer-driven run does not stay in TRAINING after a sink fails."""
        engine = StepEngine(env, rng=get_rng(0), log_probability=0.0)
        controller = TrainingController(
            TrainingSession.create(),
            engine,
            config=TrainingConfig(exploration_rate=0.0),
            scheduler=TimerScheduler(),
            session_config=SessionConfig(tick_interval_ms=1),
        )
        calls = []

        def listener(session):
            calls.append(session.agent.position)
            if len(calls) == 3:
                raise RuntimeError("render failed")

        controller.add_listener(listener)
        with controller:
            controller.start()
            deadline = time.monotonic() + 10
            while controller.status == AgentStatus.TRAINING and time.monotonic() < deadline:
                time.sleep(0.01)

            assert controller.status == AgentStatus.IDLE
            assert controller.session.agent.position == (2, 0)
            assert not controller.scheduler.running


class TestRealtime:
    """Test the controller on the wall-clock scheduler."""

    def test_converges_on_timer(self, env):
        """Test that a timer-driven run reaches FINISHED and stops ticking."""
        engine = StepEngine(env, rng=get_rng(0), log_probability=0.0)
        controller = TrainingController(
            TrainingSession.create(patience=3),
            engine,
            config=TrainingConfig(exploration_rate=0.0, early_stopping_patience=3),
            scheduler=TimerScheduler(),
            session_config=SessionConfig(tick_interval_ms=1),
        )
        with controller:
            controller.start()
            deadline = time.monotonic() + 30
            while controller.status == AgentStatus.TRAINING and time.monotonic() < deadline:
                time.sleep(0.01)

            assert controller.status == AgentStatus.FINISHED
            metrics_count = len(controller.session.metrics)
            time.sleep(0.05)
            assert len(controller.session.metrics) == metrics_count == 8
            assert not controller.scheduler.running


class TestInsight:
    """Test insight requests through the controller."""

    def test_without_generator(self, make_controller):
        """Test that no generator means no insight."""
        controller, _ = make_controller()
        assert asyncio.run(controller.generate_insight()) is None

    def test_stores_result(self, make_controller):
        """Test that the commentary is stored on the session."""
        generator = Mock()
        generator.generate = AsyncMock(return_value="Stable learning.")
        controller, scheduler = make_controller(insight_generator=generator)
        controller.start()
        scheduler.advance(200 * EPISODE_TICKS * 5)

        text = asyncio.run(controller.generate_insight())

        assert text == "Stable learning."
        assert controller.session.insight == "Stable learning."
        metrics, config = generator.generate.call_args.args
        assert len(metrics) == 5
        assert config.exploration_rate == 0.0

    def test_result_dropped_after_reset(self, make_controller):
        """Test that a reset during the request discards the late result."""
        generator = Mock()
        controller, _ = make_controller(insight_generator=generator)

        async def _generate(metrics, config):
            controller.reset()
            return "Too late."

        generator.generate = _generate

        assert asyncio.run(controller.generate_insight()) == "Too late."
        assert controller.session.insight is None

    def test_none_result_not_stored(self, make_controller):
        """Test that a skipped request leaves the previous insight in place."""
        generator = Mock()
        generator.generate = AsyncMock(return_value=None)
        controller, _ = make_controller(insight_generator=generator)
        controller.session.insight = "Earlier."

        assert asyncio.run(controller.generate_insight()) is None
        assert controller.session.insight == "Earlier."
