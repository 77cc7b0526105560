"""Text rendering of a deck for terminals."""

from typing import Optional, Sequence

from .models.game import Card

# ANSI colors
RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
DIM = "\033[2m"


def pretty_card(card: Optional[Card], back: str = "?", reveal: bool = False) -> str:
    """Face if flipped (or revealed), back otherwise, blank once matched."""
    if card is None:
        return " "
    if card.is_flipped or reveal:
        return card.symbol
    return back


def format_deck(
    deck: Sequence[Optional[Card]],
    back: str = "?",
    reveal: bool = False,
    columns: int = 4,
    color: bool = True,
) -> str:
    """Lay the deck out in numbered rows."""
    if not deck:
        return f"{DIM}[ ]{RESET}" if color else "[ ]"

    cells = []
    for index, card in enumerate(deck):
        label = f"{index:>2}"
        if color:
            label = f"{DIM}{label}{RESET}"
        cells.append(f"{label} [{pretty_card(card, back, reveal)}]")

    rows = [cells[i:i + columns] for i in range(0, len(cells), columns)]
    return "\n".join("   ".join(row) for row in rows)


def format_status(score: int, remaining_seconds: int, color: bool = True) -> str:
    """One-line score and time display."""
    if not color:
        return f"Score: {score}  Time: {remaining_seconds}"
    time_color = RED if remaining_seconds <= 5 else YELLOW if remaining_seconds <= 10 else GREEN
    return f"{BOLD}Score:{RESET} {score}  {BOLD}Time:{RESET} {time_color}{remaining_seconds}{RESET}"
