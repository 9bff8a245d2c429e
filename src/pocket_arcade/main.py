"""
Main entry point for the Pocket Arcade.

Builds the shared collaborators (event bus, wallet client, best-score
store, random source) and runs the pygame window.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from pocket_arcade.config.settings import Settings, get_settings
from pocket_arcade.core.errors import UnknownGameError
from pocket_arcade.core.events import Event, EventBus, EventType
from pocket_arcade.core.rng import create_random
from pocket_arcade.games import GAME_REGISTRY, GameContext, create_manager
from pocket_arcade.wallet import (
    AwardDispatcher,
    BestScoreStore,
    DemoContext,
    PointsClient,
    build_points_service,
)

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    if log_file:
        handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        logging.getLogger().addHandler(handler)
        logging.info(f"Logging to file: {log_file}")

    # Per-timer chatter
    logging.getLogger("pocket_arcade.core.scheduler").setLevel(logging.INFO)


def build_context(settings: Settings, demo: DemoContext) -> GameContext:
    """Wire the collaborators every game session shares."""
    event_bus = EventBus()
    service = build_points_service(settings, demo)
    awards = AwardDispatcher(service, event_bus)
    store = BestScoreStore(settings.scores.path if settings.scores.persist else None)

    return GameContext(
        event_bus=event_bus,
        rng=create_random(settings.games.seed),
        awards=awards,
        best_scores=store,
        settings=settings,
        demo=demo,
    )


async def run_arcade(settings: Settings, demo: DemoContext, game_key: Optional[str] = None) -> None:
    """Run the desktop arcade until the window closes."""
    from pocket_arcade.simulator.window import ArcadeWindow, WindowConfig

    context = build_context(settings, demo)
    manager = create_manager(context)
    if demo.enabled:
        manager.balance = demo.user.points
    elif isinstance(context.awards.service, PointsClient):
        manager.balance = await context.awards.service.fetch_balance()
    if game_key:
        manager.start_game(game_key)

    window = ArcadeWindow(
        manager=manager,
        event_bus=context.event_bus,
        config=WindowConfig.from_settings(settings),
    )

    try:
        await window.run()
    finally:
        context.event_bus.emit(Event(EventType.SHUTDOWN))
        manager.close()
        if context.awards is not None:
            await context.awards.flush()
            await context.awards.close()
        demo.disable()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pocket-arcade",
        description="Pocket Bounty arcade mini-games",
    )
    parser.add_argument("--game", help="Start this game directly (see --list)")
    parser.add_argument("--list", action="store_true", help="List games and exit")
    parser.add_argument("--demo", action="store_true", help="Play on the demo account")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--seed", type=int, default=None, help="Seed the random source")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    # Load environment variables
    load_dotenv()

    args = parse_args(argv)
    settings = get_settings()
    if args.seed is not None:
        # Copy, the cached instance is shared with every other caller
        games = settings.games.model_copy(update={"seed": args.seed})
        settings = settings.model_copy(update={"games": games})

    setup_logging(args.debug or settings.debug, settings.log_file)

    if args.list:
        for game_cls in GAME_REGISTRY:
            print(f"{game_cls.key:16} {game_cls.display_name:16} {game_cls.description}")
        return

    demo = DemoContext()
    if args.demo or settings.demo:
        demo.enable()

    logger.info("Pocket Arcade starting...")

    try:
        asyncio.run(run_arcade(settings, demo, args.game))
    except UnknownGameError as e:
        logger.error(f"{e}. Use --list to see the available games")
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Pocket Arcade stopped")


if __name__ == "__main__":
    main()
