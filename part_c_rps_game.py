#!/usr/bin/env python3
"""
part_c_rps_game.py

Rock-Paper-Scissors-Lizard-Spock against the computer, played on the console.

Rules:
    Rock crushes Scissors and Lizard
    Paper covers Rock and disproves Spock
    Scissors cuts Paper and decapitates Lizard
    Lizard eats Paper and poisons Spock
    Spock vaporizes Rock and smashes Scissors
"""

from __future__ import annotations
import argparse
import logging
import random
from typing import Callable, Dict, FrozenSet, List, Optional

# Choices
ROCK = 0
SCISSORS = 1
PAPER = 2
LIZARD = 3
SPOCK = 4
CHOICE_COUNT = 5
INVALID = -1

# Results
TIE = 0
USER_WIN = 1
COMPUTER_WIN = -1

CHOICE_NAMES = ["Rock", "Scissors", "Paper", "Lizard", "Spock"]
INVALID_NAME = "Invalid"

# what each choice defeats
BEATS: Dict[int, FrozenSet[int]] = {
    ROCK: frozenset({SCISSORS, LIZARD}),
    PAPER: frozenset({ROCK, SPOCK}),
    SCISSORS: frozenset({PAPER, LIZARD}),
    LIZARD: frozenset({PAPER, SPOCK}),
    SPOCK: frozenset({ROCK, SCISSORS}),
}

ALIASES: Dict[str, int] = {
    "rock": ROCK,
    "scissors": SCISSORS,
    "paper": PAPER,
    "lizard": LIZARD,
    "spock": SPOCK,
    "바위": ROCK,
    "가위": SCISSORS,
    "보": PAPER,
    "도마뱀": LIZARD,
    "스팍": SPOCK,
    "스포크": SPOCK,
}

PROMPT_CHOICE = "Enter your choice (rock, scissors, paper, lizard, spock): "
PROMPT_PLAY_AGAIN = "Do you want to play again? (y/n): "
MSG_COMPUTER_CHOSE = "Computer chose: {}"
MSG_INVALID_CHOICE = "Invalid choice. Please try again."
MSG_INVALID_RESPONSE = "Invalid input. Please enter 'y' or 'n'."
RESULT_MESSAGES = {USER_WIN: "You win!", COMPUTER_WIN: "You lose!", TIE: "It's a tie!"}

logger = logging.getLogger("RpsGame")


def get_choice_name(choice: int) -> str:
    if 0 <= choice < CHOICE_COUNT:
        return CHOICE_NAMES[choice]
    return INVALID_NAME


def get_computer_choice(rng: Optional[random.Random] = None) -> int:
    """Uniformly random choice in 0..4; pass a seeded Random for repeatable games."""
    return (rng or random).randrange(CHOICE_COUNT)


def user_wins_against(user_choice: int, computer_choice: int) -> bool:
    return computer_choice in BEATS.get(user_choice, frozenset())


def determine_winner(user_choice: int, computer_choice: int) -> int:
    """
    Compare two choices.

    Returns:
        TIE when equal, USER_WIN when the user's choice beats the computer's,
        COMPUTER_WIN otherwise.
    """
    if user_choice == computer_choice:
        return TIE
    if user_wins_against(user_choice, computer_choice):
        return USER_WIN
    return COMPUTER_WIN


def parse_user_input(text: Optional[str]) -> int:
    """
    Map raw console input to a choice.

    Surrounding spaces/tabs are trimmed and the text is case-folded. Accepts a
    single digit 0-4 (5 is also read as Spock for players counting from 1),
    the English names and the Korean aliases. Anything else yields INVALID.
    """
    if text is None:
        return INVALID
    buf = text.strip(" \t").lower()
    if len(buf) == 1 and buf.isdigit():
        n = int(buf)
        if n < CHOICE_COUNT:
            return n
        if n == CHOICE_COUNT:
            return SPOCK
        return INVALID
    return ALIASES.get(buf, INVALID)


def play_round(input_fn: Callable[[str], str] = input, rng: Optional[random.Random] = None) -> bool:
    """
    Play one round and ask whether to continue.

    Returns True to keep playing, False to quit. EOF on input ends the game.
    """
    try:
        raw = input_fn(PROMPT_CHOICE)
    except EOFError:
        print()
        return False

    user_choice = parse_user_input(raw)
    if user_choice == INVALID:
        print(MSG_INVALID_CHOICE)
        return True

    computer_choice = get_computer_choice(rng)
    print(MSG_COMPUTER_CHOSE.format(get_choice_name(computer_choice)))
    result = determine_winner(user_choice, computer_choice)
    print(RESULT_MESSAGES[result])
    logger.debug("user=%s computer=%s result=%d",
                 get_choice_name(user_choice), get_choice_name(computer_choice), result)

    while True:
        try:
            answer = input_fn(PROMPT_PLAY_AGAIN).strip()
        except EOFError:
            print()
            return False
        if answer == "y":
            return True
        if answer == "n":
            return False
        print(MSG_INVALID_RESPONSE)


def play(input_fn: Callable[[str], str] = input, rng: Optional[random.Random] = None) -> None:
    while play_round(input_fn, rng):
        pass


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Part C: Rock-Paper-Scissors-Lizard-Spock")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the computer's choices")
    args = parser.parse_args(argv)
    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        play(rng=rng)
    except KeyboardInterrupt:
        print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
