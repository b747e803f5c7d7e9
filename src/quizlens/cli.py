"""Command-line interface for quizlens.

The capture cycle is normally triggered by a host application. These
commands run the pieces standalone for setup and troubleshooting.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="quizlens",
        description="Screenshot a multiple-choice question and show the model's answer",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/quizlens.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("once", help="Run one capture cycle and show the overlay")
    analyze_parser = subparsers.add_parser("analyze", help="Ask the model about a saved image")
    analyze_parser.add_argument("image", type=Path, help="PNG or JPEG screenshot")
    subparsers.add_parser("capture-test", help="Take one screenshot and save it")
    subparsers.add_parser("check", help="Verify the API key against the model service")

    return parser.parse_args(argv)


async def _run_once(settings) -> None:
    """Build all components and run a single cycle with the Qt overlay."""
    from PyQt6.QtWidgets import QApplication

    from quizlens.capture.screen import MssScreenshotSource
    from quizlens.interpreter.gemini import GeminiVisionClient
    from quizlens.overlay.presenter import OverlayPresenter
    from quizlens.overlay.qt import QtOverlayBackend
    from quizlens.pipeline.cycle import CaptureOrchestrator, CycleConfig
    from quizlens.pipeline.pump import QtEventPump
    from quizlens.windows.qt import QtWindowEnumerator

    app = QApplication.instance() or QApplication(sys.argv[:1])

    presenter = OverlayPresenter(QtOverlayBackend(), settings.overlay)
    orchestrator = CaptureOrchestrator(
        screenshots=MssScreenshotSource(
            output_dir=settings.capture.screenshot_dir,
            monitor_index=settings.capture.monitor_index,
        ),
        client=GeminiVisionClient(config_loader=lambda: settings),
        presenter=presenter,
        windows=QtWindowEnumerator(),
        config=CycleConfig.from_settings(settings),
    )

    async with QtEventPump(app=app):
        session = await orchestrator.run_cycle()
        print(f"Displayed: {session.displayed_content}")
        # Keep pumping until the overlay dismisses itself.
        await asyncio.sleep(settings.overlay.dismiss_after + 0.2)
        await presenter.cleanup()


async def _analyze(settings, image: Path) -> None:
    """Query the model with an existing screenshot."""
    from quizlens.interpreter.gemini import GeminiVisionClient
    from quizlens.pipeline.cycle import resolve_content

    client = GeminiVisionClient(config_loader=lambda: settings)
    result = await client.analyze(image)

    print(f"Outcome:  {result.outcome.value}")
    print(f"Token:    {result.token}")
    print(f"Preview:  {result.preview}")
    print(f"Display:  {resolve_content(result)}")
    if result.raw_text:
        print("-" * 40)
        print(result.raw_text)
        print("-" * 40)


async def _capture_test(settings) -> None:
    """Take a single screenshot and report where it went."""
    from quizlens.capture.base import noop
    from quizlens.capture.screen import MssScreenshotSource

    source = MssScreenshotSource(
        output_dir=settings.capture.screenshot_dir,
        monitor_index=settings.capture.monitor_index,
    )
    path = await source.take_screenshot(noop, noop)
    print(f"Saved screenshot to {path}")


async def _check(settings) -> bool:
    from quizlens.interpreter.gemini import GeminiVisionClient

    client = GeminiVisionClient(config_loader=lambda: settings)
    ok = await client.health_check()
    print("OK -- API key accepted." if ok else "FAILED -- check GEMINI_API_KEY and network access.")
    return ok


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the quizlens CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from quizlens.config.settings import load_settings
    from quizlens.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "once":
        logger.info("Running a single capture cycle")
        asyncio.run(_run_once(settings))

    elif args.command == "analyze":
        logger.info("Analyzing %s", args.image)
        asyncio.run(_analyze(settings, args.image))

    elif args.command == "capture-test":
        logger.info("Running capture test")
        asyncio.run(_capture_test(settings))

    elif args.command == "check":
        if not asyncio.run(_check(settings)):
            sys.exit(1)


if __name__ == "__main__":
    main()
