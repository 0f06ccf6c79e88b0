import random

import pytest

from sectorfs.insult import GRAMMAR, expand, generate, main


def _sentences(text):
    return [s for s in text.split("\n") if s]


def test_generate_is_deterministic_for_a_seed():
    text = generate(7, 3)
    assert text == generate(7, 3)
    assert len(_sentences(text)) == 3


def test_generate_layout_and_sentence_count():
    text = generate(4951, 4)
    assert text.startswith("\n\n")
    assert text.endswith("\n\n")
    sentences = _sentences(text)
    assert len(sentences) == 4
    for sentence in sentences:
        assert sentence.split()[0] in ("You", "May", "With")
        assert sentence.endswith(".")


def test_generated_text_has_no_rule_numbers():
    text = generate(123, 10)
    assert all(not word[0].isdigit() for word in text.split())


def test_expand_terminal_rule():
    assert expand(19, random.Random(1)) in (" force", " fury", " power", " rage")


def test_expand_punctuation_gets_no_space():
    for seed in range(20):
        assert " ." not in expand(0, random.Random(seed))


def test_expand_draws_from_grammar_alternatives():
    choices = {alternative[0] for alternative in GRAMMAR[19]}
    for seed in range(20):
        assert expand(19, random.Random(seed)).strip() in choices


def test_expand_start_rule_begins_with_known_word():
    for seed in range(20):
        assert expand(0, random.Random(seed)).split()[0] in ("You", "May", "With")


def test_main_writes_default_output(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out == generate(4951, 4)


def test_main_seed_and_count(capsys):
    assert main(["-s", "99", "-n", "2"]) == 0
    assert capsys.readouterr().out == generate(99, 2)


def test_main_help(capsys):
    assert main(["-h"]) == 0
    assert "Usage: insult [OPTION]..." in capsys.readouterr().out


@pytest.mark.parametrize(
    "args, message",
    [
        (["-n", "0"], "Must have at least one sentence"),
        (["-s"], "Missing value for -s"),
        (["-n"], "Missing value for -n"),
        (["-f"], "Missing value for -f"),
        (["-s", "1", "-s", "2"], "Can't have more than one seed"),
        (["-n", "1", "-n", "2"], "Can't have more than one sentence option"),
        (["-x"], "Unrecognized flag"),
        (["-n", "1", "-h"], "Unrecognized flag"),
    ],
)
def test_main_errors(capsys, args, message):
    assert main(args) == -1
    assert capsys.readouterr().out.startswith(message)


def test_main_writes_file(tmp_path, capsys):
    path = tmp_path / "out.txt"
    assert main(["-f", str(path), "-n", "1", "-s", "7"]) == 0
    assert path.read_text(encoding="utf-8") == generate(7, 1)
    assert capsys.readouterr().out == ""


def test_main_open_failure(tmp_path, capsys):
    path = tmp_path / "missing" / "out.txt"
    assert main(["-f", str(path)]) == 1
    assert capsys.readouterr().out == f"{path}: open failed\n"