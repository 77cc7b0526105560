#!/usr/bin/env python3
"""
Interactive Concentration game in the terminal.

Find the pairs before the countdown runs out.

Usage:
    # Default theme, easy
    python scripts/play.py

    # Hard mode: the board rotates every 10 seconds
    python scripts/play.py --difficulty hard

    # Your own symbols
    python scripts/play.py --symbols A B C D

    # Themes from a JSON file
    python scripts/play.py --themes-file themes.json --theme Fruits
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from concentration.config import settings
from concentration.game import GameObserver, ThemeCatalog, load_themes, make_game
from concentration.models.game import Difficulty, GameConfig, Theme
from concentration.render import RED, GREEN, YELLOW, RESET, format_deck, format_status


def parse_args():
    parser = argparse.ArgumentParser(description="Play Concentration in the terminal")
    parser.add_argument("--theme", "-t", default=None,
                       help="Theme title (default: first built-in theme)")
    parser.add_argument("--difficulty", "-d", choices=[d.value for d in Difficulty],
                       default=Difficulty.EASY.value,
                       help="Difficulty (default: easy)")
    parser.add_argument("--symbols", "-s", nargs="+",
                       help="Play with these symbols instead of a theme")
    parser.add_argument("--duration", type=int, default=settings.game_duration_seconds,
                       help=f"Seconds on the clock (default: {settings.game_duration_seconds})")
    parser.add_argument("--themes-file", type=Path,
                       help="JSON file with extra themes")
    return parser.parse_args()


class TerminalObserver(GameObserver):
    """Prints engine events and tracks when the game is over."""

    def __init__(self, game, back: str):
        self.game = game
        self.back = back
        self.finished = asyncio.Event()

    def redraw(self):
        print()
        print(format_deck(self.game.deck, back=self.back))
        print(format_status(self.game.score, self.game.remaining_seconds))

    def on_time_changed(self, seconds: int) -> None:
        if seconds <= 5:
            print(f"  {RED}{seconds}s left{RESET}")

    def on_card_selected(self, index: int) -> None:
        self.redraw()

    def on_card_positions_changed(self, deck) -> None:
        print(f"\n  {YELLOW}The cards moved!{RESET}")
        self.redraw()

    def on_match_succeeded(self, first_index: int, second_index: int) -> None:
        print(f"  {GREEN}Match!{RESET}")

    def on_match_failed(self, first_index: int, second_index: int) -> None:
        print(f"  {RED}No match{RESET} (pick any card to continue)")

    def on_game_finished(self, score: int, won: bool) -> None:
        if won:
            print(f"\n  {GREEN}You won! Final score: {score}{RESET}")
        else:
            print(f"\n  {RED}Time's up! Final score: {score}{RESET}")
        self.finished.set()


async def play(theme: Theme, difficulty: Difficulty, config: GameConfig) -> int:
    game = make_game(theme, difficulty, config)
    observer = TerminalObserver(game, theme.card_symbol)
    game.observer = observer

    game.create_deck()
    print(f"\n{theme.title} ({difficulty.description()}): memorize the cards...")
    print(format_deck(game.deck, reveal=True))
    await asyncio.sleep(settings.peek_seconds * 3)

    game.shuffle()
    game.start_timer()
    observer.redraw()

    loop = asyncio.get_running_loop()
    while not observer.finished.is_set():
        read = loop.run_in_executor(None, input, "Card #: ")
        finished = asyncio.ensure_future(observer.finished.wait())
        done, _ = await asyncio.wait({read, finished}, return_when=asyncio.FIRST_COMPLETED)
        if read not in done:
            print("(press Enter to exit)")
            break
        finished.cancel()

        line = read.result().strip().lower()
        if line in ("q", "quit"):
            game.stop()
            return 0
        try:
            game.select_card(int(line))
        except ValueError:
            print(f"  {RED}Enter a card number or Q to quit{RESET}")

    return 0


def main():
    args = parse_args()

    catalog = ThemeCatalog.from_settings(settings)
    if args.themes_file:
        for theme in load_themes(args.themes_file):
            catalog.add(theme)

    if args.symbols:
        theme = Theme(title=args.theme or "Custom", symbols=args.symbols)
    elif args.theme:
        theme = catalog.get(args.theme)
        if theme is None:
            titles = ", ".join(t.title for t in catalog.all())
            print(f"{RED}Unknown theme '{args.theme}'. Available: {titles}{RESET}")
            return 1
    else:
        theme = catalog.default

    config = GameConfig.from_settings(settings)
    config.duration_seconds = args.duration

    return asyncio.run(play(theme, Difficulty(args.difficulty), config))


if __name__ == "__main__":
    sys.exit(main())
