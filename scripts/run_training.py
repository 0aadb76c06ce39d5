"""Run an AgentX training session."""

import argparse
import asyncio
import time
from datetime import UTC, datetime
from pathlib import Path

from agentx.agent import AgentStatus, StepResult
from agentx.env.theme import Theme
from agentx.logging_config import LOG_LEVEL_CHOICES, logger, set_log_level
from agentx.report.csv_export import export_session_to_csv
from agentx.report.plots import plot_session
from agentx.report.summary import summary
from agentx.training import ManualScheduler, TimerScheduler, TrainingController, TrainingSession
from agentx.utils.config_loader import (
    EnvironmentConfig,
    SimulationConfig,
    load_simulation_config,
)
from agentx.utils.controller_factory import setup_training_controller

DEFAULT_MAX_TICKS = 5000
DEFAULT_RENDER_EVERY = 0
REALTIME_POLL_SECONDS = 0.05


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Run an AgentX training session.")
    parser.add_argument(
        "--config",
        type=str,
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for exploration and log sampling (overrides the config file).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=LOG_LEVEL_CHOICES,
        help="Set the logging level (default: INFO). Use 'NONE' to disable logging.",
    )
    parser.add_argument(
        "--theme",
        type=str,
        choices=[theme.value for theme in Theme],
        help="Grid rendering theme (overrides the config file).",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Tick on the wall clock at the configured interval instead of as fast as possible.",
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=DEFAULT_MAX_TICKS,
        help=f"Stop after this many ticks if training has not finished "
        f"(default: {DEFAULT_MAX_TICKS}; 0 means no limit).",
    )
    parser.add_argument(
        "--render-every",
        type=int,
        default=DEFAULT_RENDER_EVERY,
        help="Render the grid every N ticks (default: 0, never).",
    )
    parser.add_argument(
        "--insight",
        action="store_true",
        help="Request a narrative insight on the run once it ends.",
    )
    parser.add_argument(
        "--export",
        action="store_true",
        help="Write CSV data and plots under ./exports/<timestamp>/.",
    )

    return parser.parse_args()


def render_session(controller: TrainingController, session: TrainingSession) -> None:
    """Print the grid with the agent and a one-line status."""
    agent = session.agent
    for line in controller.step_engine.env.render(agent.position, agent.direction):
        print(line)  # noqa: T201
    print(  # noqa: T201
        f"Episode: {agent.episode:<4} Status: {agent.status.value:<8} "
        f"Reward: {agent.current_reward:>6.2f} Total: {agent.total_reward:>8.2f}",
    )


def run_headless(controller: TrainingController, scheduler: ManualScheduler, max_ticks: int) -> int:
    """Fire ticks back to back until training leaves TRAINING or the tick limit is hit."""
    ticks = 0
    while (max_ticks <= 0 or ticks < max_ticks) and scheduler.fire():
        ticks += 1
        if controller.status != AgentStatus.TRAINING:
            break
    return ticks


def run_realtime(controller: TrainingController, max_ticks: int, step_counter: list[int]) -> None:
    """Wait on the wall-clock timer until training leaves TRAINING or the tick limit is hit."""
    while controller.status == AgentStatus.TRAINING:
        if 0 < max_ticks <= step_counter[0]:
            break
        time.sleep(REALTIME_POLL_SECONDS)


def main() -> None:
    """Run an AgentX training session."""
    args = parse_arguments()
    set_log_level(args.log_level)

    config = load_simulation_config(args.config) if args.config else SimulationConfig()
    if args.theme:
        environment = config.environment or EnvironmentConfig()
        config = config.model_copy(
            update={"environment": environment.model_copy(update={"theme": Theme(args.theme)})},
        )

    scheduler = TimerScheduler() if args.realtime else ManualScheduler()
    controller, seed = setup_training_controller(
        config,
        scheduler=scheduler,
        seed=args.seed,
        enable_insight=args.insight,
    )

    timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    logger.info(f"Session {timestamp} using seed {seed}")

    step_counter = [0]

    def on_step(_result: StepResult) -> None:
        step_counter[0] += 1
        if args.render_every > 0 and step_counter[0] % args.render_every == 0:
            render_session(controller, controller.session)

    controller.add_episode_listener(
        lambda point: logger.debug(f"Episode {point.episode} reward {point.reward:.2f}"),
    )
    controller.add_step_listener(on_step)

    with controller:
        try:
            controller.start()
            if isinstance(scheduler, ManualScheduler):
                run_headless(controller, scheduler, args.max_ticks)
            else:
                run_realtime(controller, args.max_ticks, step_counter)
        except KeyboardInterrupt:
            message = "KeyboardInterrupt detected. Stopping training."
            logger.info(message)
            print(message)  # noqa: T201
        finally:
            controller.stop()

        if args.insight:
            insight = asyncio.run(controller.generate_insight())
            if insight is None:
                logger.info("No insight available for this session.")

    session = controller.session
    summary(session, controller.config, session_id=timestamp)

    if args.export:
        session_dir = Path.cwd() / "exports" / timestamp / "session"
        export_session_to_csv(session, session_dir / "data")
        plot_session("", session.metrics, session_dir / "plots")


if __name__ == "__main__":
    main()
