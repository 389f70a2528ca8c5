"""Export a saved chat session to a PDF via a headless staging surface."""

from __future__ import annotations

import argparse
import asyncio
from typing import List, Sequence

from config_loader import ConfigError, ExportSettings, resolve_export_settings
from history_export import (
    ConsoleAchievementEmitter,
    ConversationTurn,
    ExportDocumentBuilder,
    ExportOrchestrator,
    ExportResult,
    HistoryView,
    JsonProgressStore,
    OffscreenStager,
    PaginatedAssembler,
    load_turns,
    open_surface,
)


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments for the chat history exporter."""

    parser = argparse.ArgumentParser(
        description=(
            "Render a saved chat session off-screen and export it as a"
            " single A4-width PDF."
        )
    )
    parser.add_argument("--config", help="Path to config JSON file.")
    parser.add_argument(
        "--turns", help="Override the saved session JSON (array of turns)."
    )
    parser.add_argument(
        "--output-dir", help="Override the PDF output directory."
    )
    parser.add_argument(
        "--progress", help="Override the progress counters JSON path."
    )
    return parser.parse_args()


async def export_history(
    settings: ExportSettings, turns: Sequence[ConversationTurn]
) -> ExportResult:
    """Open the history view, export once, and close the view again."""

    progress = JsonProgressStore(settings.progress_path)
    achievements = ConsoleAchievementEmitter()
    snapshot = tuple(turns)

    async with open_surface(scale=settings.capture_scale) as surface:
        stager = OffscreenStager(
            surface,
            settle_delay=settings.settle_delay_ms / 1000,
            settle_timeout=settings.settle_timeout_ms / 1000,
        )
        orchestrator = ExportOrchestrator(
            stager=stager,
            output_dir=settings.output_dir,
            progress=progress,
            achievements=achievements,
            builder=ExportDocumentBuilder(bot_name=settings.bot_name),
            assembler=PaginatedAssembler(
                artifact_name=settings.artifact_name,
                title=f"{settings.bot_name} Chat History",
            ),
            notify=lambda message: print(f"⚠️ {message}"),
        )
        view = HistoryView(
            turns=lambda: snapshot,
            orchestrator=orchestrator,
            progress=progress,
            achievements=achievements,
        )
        view.open()
        try:
            return await view.download()
        finally:
            view.close()


def main() -> None:
    """Entry point for the chat history export CLI."""

    args = parse_args()
    try:
        settings = resolve_export_settings(
            config_path=args.config,
            turns_json=args.turns,
            output_dir=args.output_dir,
            progress_path=args.progress,
        )
    except ConfigError as exc:
        raise SystemExit(f"Config error: {exc}") from exc

    if not settings.turns_json:
        raise SystemExit(
            "Config error: turns_json path missing. Set it in config or"
            " supply --turns."
        )

    try:
        turns: List[ConversationTurn] = load_turns(settings.turns_json)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Unable to read chat session: {exc}") from exc

    result = asyncio.run(export_history(settings, turns))
    if not result.ok:
        raise SystemExit(1)
    print(f"Chat history saved to {result.path}")


if __name__ == "__main__":
    main()
