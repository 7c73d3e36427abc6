import itertools
import random

import pytest

import part_c_rps_game as game


def test_choice_names():
    assert [game.get_choice_name(i) for i in range(5)] == ["Rock", "Scissors", "Paper", "Lizard", "Spock"]
    assert game.get_choice_name(-1) == "Invalid"
    assert game.get_choice_name(5) == "Invalid"


def test_computer_choice_in_range_and_seedable():
    rng_a, rng_b = random.Random(7), random.Random(7)
    picks = [game.get_computer_choice(rng_a) for _ in range(50)]
    assert all(0 <= p < 5 for p in picks)
    assert picks == [game.get_computer_choice(rng_b) for _ in range(50)]


@pytest.mark.parametrize("winner,loser", [
    (game.ROCK, game.SCISSORS), (game.ROCK, game.LIZARD),
    (game.PAPER, game.ROCK), (game.PAPER, game.SPOCK),
    (game.SCISSORS, game.PAPER), (game.SCISSORS, game.LIZARD),
    (game.LIZARD, game.PAPER), (game.LIZARD, game.SPOCK),
    (game.SPOCK, game.ROCK), (game.SPOCK, game.SCISSORS),
])
def test_rules(winner, loser):
    assert game.user_wins_against(winner, loser)
    assert game.determine_winner(winner, loser) == game.USER_WIN
    assert game.determine_winner(loser, winner) == game.COMPUTER_WIN


def test_every_pair_has_exactly_one_winner():
    for a, b in itertools.permutations(range(5), 2):
        assert game.user_wins_against(a, b) != game.user_wins_against(b, a)
    for a in range(5):
        assert game.determine_winner(a, a) == game.TIE


@pytest.mark.parametrize("text,expected", [
    ("rock", game.ROCK),
    ("  Scissors\t", game.SCISSORS),
    ("PAPER", game.PAPER),
    ("lizard", game.LIZARD),
    ("Spock", game.SPOCK),
    ("0", game.ROCK),
    ("4", game.SPOCK),
    ("5", game.SPOCK),
    ("6", game.INVALID),
    ("12", game.INVALID),
    ("바위", game.ROCK),
    ("가위", game.SCISSORS),
    ("보", game.PAPER),
    ("도마뱀", game.LIZARD),
    ("스팍", game.SPOCK),
    ("스포크", game.SPOCK),
    ("", game.INVALID),
    ("xyz", game.INVALID),
    (None, game.INVALID),
])
def test_parse_user_input(text, expected):
    assert game.parse_user_input(text) == expected


class FixedRng:
    def __init__(self, value):
        self.value = value

    def randrange(self, n):
        return self.value


def scripted(answers):
    it = iter(answers)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return fake_input


def test_play_round_win_then_quit(capsys):
    keep_going = game.play_round(scripted(["rock", "maybe", "n"]), FixedRng(game.SCISSORS))
    out = capsys.readouterr().out
    assert keep_going is False
    assert "Computer chose: Scissors" in out
    assert "You win!" in out
    assert "Invalid input. Please enter 'y' or 'n'." in out


def test_play_round_invalid_choice(capsys):
    assert game.play_round(scripted(["banana"]), FixedRng(0)) is True
    assert "Invalid choice. Please try again." in capsys.readouterr().out


def test_play_until_eof(capsys):
    game.play(scripted(["spock", "y", "paper"]), FixedRng(game.PAPER))
    out = capsys.readouterr().out
    assert "You lose!" in out
    assert "It's a tie!" in out
