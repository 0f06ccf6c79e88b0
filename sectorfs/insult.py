"""Random insult generator driven by a small hard-coded grammar."""

from __future__ import annotations

import random
import re
import string
import sys
from typing import List, Optional, Sequence, Tuple

DEFAULT_SEED = 4951
DEFAULT_COUNT = 4

# Each rule is a flat word list plus its location table: the first entry
# is the number of alternatives, followed by the word index at which each
# alternative starts and the index just past the last one.  A word that
# starts with a digit names another rule to expand in its place.
_RULES: Tuple[Tuple[Tuple[str, ...], Tuple[int, ...]], ...] = (
    (("You", "1", "5", ".", "May", "13", ".", "With", "the", "19", "of", "18",
      ",", "may", "13", "."),
     (3, 0, 4, 7, 16)),
    (("3", "4", "2", ",", "1"),
     (3, 0, 1, 2, 5)),
    (("3", "4"),
     (2, 0, 1, 2)),
    (("lame", "dried", "up", "par-broiled", "bloated", "half-baked", "spiteful",
      "egotistical", "ungrateful", "stupid", "moronic", "fat", "ugly", "puny",
      "pitiful", "insignificant", "blithering", "repulsive", "worthless",
      "blundering", "retarded", "useless", "obnoxious", "low-budget", "assinine",
      "neurotic", "subhuman", "crochety", "indescribable", "contemptible",
      "unspeakable", "sick", "lazy", "good-for-nothing", "slutty",
      "mentally-deficient", "creepy", "sloppy", "dismal", "pompous", "pathetic",
      "friendless", "revolting", "slovenly", "cantankerous", "uncultured",
      "insufferable", "gross", "unkempt", "defective", "crumby"),
     (50, 0, 1, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20,
      21, 22, 23, 24, 25, 26, 27, 28, 29, 30, 31, 32, 33, 34, 35, 36, 37, 38, 39,
      40, 41, 42, 43, 44, 45, 46, 47, 48, 49, 50, 51)),
    (("putrefied", "festering", "funky", "moldy", "leprous", "curdled", "fetid",
      "slimy", "crusty", "sweaty", "damp", "deranged", "smelly", "stenchy",
      "malignant", "noxious", "grimy", "reeky", "nasty", "mutilated", "sloppy",
      "gruesome", "grisly", "sloshy", "wormy", "mealy", "spoiled", "contaminated",
      "rancid", "musty", "fly-covered", "moth-eaten", "decaying", "decomposed",
      "freeze-dried", "defective", "petrified", "rotting", "scabrous", "hirsute"),
     (40, 0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19,
      20, 21, 22, 23, 24, 25, 26, 27, 28, 29, 30, 31, 32, 33, 34, 35, 36, 37, 38,
      39, 40)),
    (("10", ",", "bad", "excuse", "for", "6", ",", "6", "for", "brains", ",",
      "4", "11", "8", "for", "brains", "offspring", "of", "a", "motherless", "10",
      "7", "6", "7", "4", "11", "8"),
     (7, 0, 1, 6, 10, 16, 21, 23, 27)),
    (("shit", "toe", "jam", "filth", "puss", "earwax", "leaf", "clippings",
      "bat", "guano", "mucus", "fungus", "mung", "refuse", "earwax", "spittoon",
      "spittle", "phlegm"),
     (14, 0, 1, 3, 4, 5, 6, 8, 10, 11, 12, 13, 14, 15, 17, 18)),
    (("bit", "of", "piece", "of", "vat", "of", "lump", "of", "crock", "of",
      "ball", "of", "tub", "of", "load", "of", "bucket", "of", "mound", "of",
      "glob", "of", "bag", "of", "heap", "of", "mountain", "of", "load", "of",
      "barrel", "of", "sack", "of", "blob", "of", "pile", "of", "truckload", "of",
      "vat", "of"),
     (21, 0, 2, 4, 6, 8, 10, 12, 14, 16, 18, 20, 22, 24, 26, 28, 30, 32, 34, 36,
      38, 40, 42)),
    (("droppings", "mung", "zits", "puckies", "tumors", "cysts", "tumors",
      "livers", "froth", "parts", "scabs", "guts", "entrails", "blubber",
      "carcuses", "gizards", "9"),
     (17, 0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17)),
    (("kidneys", "genitals", "buttocks", "earlobes", "innards", "feet"),
     (6, 0, 1, 2, 3, 4, 5, 6)),
    (("pop", "tart", "warthog", "twinkie", "barnacle", "fondue", "pot",
      "cretin", "fuckwad", "moron", "ass", "neanderthal", "nincompoop",
      "simpleton", "11"),
     (13, 0, 2, 3, 4, 5, 7, 8, 9, 10, 11, 12, 13, 14, 15)),
    (("donkey", "llama", "dingo", "lizard", "gekko", "lemur", "moose", "camel",
      "goat", "eel"),
     (10, 0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10)),
    (("love", "cuddle", "fondle", "adore", "smooch", "hug", "caress", "worship",
      "look", "at", "touch"),
     (10, 0, 1, 2, 3, 4, 5, 6, 7, 8, 10, 11)),
    (("14", "20", "23", "14", "17", "20", "23", "14", "find", "your", "9",
      "suddenly", "delectable", "14", "and", "14", "seek", "a", "battleground",
      "23"),
     (4, 0, 3, 7, 13, 20)),
    (("15", "21", "15", "21", "15", "21", "15", "21", "a", "22", "Rush",
      "Limbaugh", "the", "hosts", "of", "Hades"),
     (6, 0, 2, 4, 6, 8, 12, 16)),
    (("a", "4", "hoard", "of", "a", "4", "pack", "of", "a", "truckload", "of",
      "a", "swarm", "of", "many", "an", "army", "of", "a", "4", "heard", "of",
      "a", "4", "platoon", "of", "a", "4", "and", "4", "group", "of", "16"),
     (10, 0, 4, 8, 11, 14, 15, 18, 22, 26, 32, 33)),
    (("a", "thousand", "three", "million", "ninty-nine", "nine-hundred,",
      "ninty-nine", "forty-two", "a", "gazillion", "sixty-eight", "times",
      "thirty-three"),
     (7, 0, 2, 4, 5, 7, 8, 10, 13)),
    (("viciously", "manicly", "merrily", "happily", ",", "with", "the", "19",
      "of", "18", ",", "gleefully", ",", "with", "much", "ritualistic",
      "celebration", ",", "franticly"),
     (8, 0, 1, 2, 3, 4, 11, 12, 18, 19)),
    (("an", "irate", "manticore", "Thor's", "belch", "Alah's", "fist", "16",
      "titans", "a", "particularly", "vicious", "she-bear", "in", "the", "midst",
      "of", "her", "menstrual", "cycle", "a", "pissed-off", "Jabberwock"),
     (6, 0, 3, 5, 7, 9, 20, 23)),
    (("force", "fury", "power", "rage"),
     (4, 0, 1, 2, 3, 4)),
    (("spit", "shimmy", "slobber", "find", "refuge", "find", "shelter", "dance",
      "retch", "vomit", "defecate", "erect", "a", "strip", "mall", "build", "a",
      "26", "have", "a", "religious", "experience", "discharge", "bodily",
      "waste", "fart", "dance", "drool", "lambada", "spill", "16", "rusty",
      "tacks", "bite", "you", "sneeze", "sing", "16", "campfire", "songs",
      "smite", "you", "16", "times", "construct", "a", "new", "home", "throw",
      "a", "party", "procreate"),
     (25, 0, 1, 2, 3, 5, 7, 8, 9, 10, 11, 15, 18, 22, 25, 26, 27, 28, 29, 33,
      35, 36, 40, 44, 48, 51, 52)),
    (("yaks", "22", "maggots", "22", "cockroaches", "stinging", "scorpions",
      "fleas", "22", "weasels", "22", "gnats", "South", "American", "killer",
      "bees", "spiders", "4", "monkeys", "22", "wiener-dogs", "22", "rats", "22",
      "wolverines", "4", ",", "22", "pit-fiends"),
     (14, 0, 1, 3, 5, 7, 8, 10, 12, 16, 17, 19, 21, 23, 25, 29)),
    (("frothing", "manic", "crazed", "plague-ridden", "disease-carrying",
      "biting", "rabid", "blood-thirsty", "ravaging", "slavering"),
     (10, 0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10)),
    (("in", "24", "25", "upon", "your", "mother's", "grave", "on", "24", "best",
      "rug", "in", "the", "26", "you", "call", "home", "upon", "your", "heinie"),
     (5, 0, 3, 7, 11, 17, 20)),
    (("your", "your", "your", "your", "father's", "your", "mother's", "your",
      "grandma's"),
     (6, 0, 1, 2, 3, 5, 7, 9)),
    (("entrails", "anal", "cavity", "shoes", "house", "pantry", "general",
      "direction", "pants", "bed"),
     (8, 0, 1, 3, 4, 5, 6, 8, 9, 10)),
    (("rat", "hole", "sewer", "toxic", "dump", "oil", "refinery", "landfill",
      "porto-pottie"),
     (6, 0, 2, 3, 5, 7, 8, 9)),
)


def _alternatives(
    words: Sequence[str], locs: Sequence[int]
) -> Tuple[Tuple[str, ...], ...]:
    count = locs[0]
    bounds = locs[1:count + 2]
    return tuple(tuple(words[a:b]) for a, b in zip(bounds, bounds[1:]))


GRAMMAR: Tuple[Tuple[Tuple[str, ...], ...], ...] = tuple(
    _alternatives(words, locs) for words, locs in _RULES
)
"""Rules indexed by number; each is a tuple of alternative word sequences."""

_USAGE = (
    "\n"
    "Usage: insult [OPTION]...\n"
    "Prints random insults to screen.\n\n"
    "  -h:               this help message\n"
    "  -s <integer>:     set the random seed (default 4951)\n"
    "  -n <integer>:     choose number of insults (default 4)\n"
    "  -f <file>:        redirect output to <file>\n"
)

_ATOI = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def expand(num: int, rng: random.Random) -> str:
    """Expands rule NUM, choosing alternatives with RNG."""
    alternatives = GRAMMAR[num]
    pieces: List[str] = []
    for word in alternatives[rng.randrange(len(alternatives))]:
        if word[0].isdigit():
            pieces.append(expand(_atoi(word), rng))
        else:
            if word[0] not in string.punctuation:
                pieces.append(" ")
            pieces.append(word)
    return "".join(pieces)


def generate(seed: int = DEFAULT_SEED, count: int = DEFAULT_COUNT) -> str:
    """Returns COUNT insults generated from SEED, formatted for output."""
    rng = random.Random(seed)
    parts = ["\n"]
    for _ in range(count):
        parts.append("\n")
        parts.append(expand(0, rng))
        parts.append("\n\n")
    return "".join(parts)


def _usage(ret_code: int, message: Optional[str] = None) -> int:
    if message is not None:
        sys.stdout.write(message)
    sys.stdout.write(_USAGE)
    return ret_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point; returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    seed = DEFAULT_SEED
    count = DEFAULT_COUNT
    seed_seen = count_seen = False
    output_path: Optional[str] = None

    i = 0
    while i < len(args):
        arg = args[i]
        # Help is recognised only as the first argument.
        if args[0] == "-h":
            return _usage(0)
        if arg == "-s":
            if seed_seen:
                return _usage(-1, "Can't have more than one seed")
            seed_seen = True
            i += 1
            if i >= len(args):
                return _usage(-1, "Missing value for -s")
            seed = _atoi(args[i])
        elif arg == "-n":
            if count_seen:
                return _usage(-1, "Can't have more than one sentence option")
            count_seen = True
            i += 1
            if i >= len(args):
                return _usage(-1, "Missing value for -n")
            count = _atoi(args[i])
            if count < 1:
                return _usage(-1, "Must have at least one sentence")
        elif arg == "-f":
            if output_path is not None:
                return _usage(-1, "Can't have more than one output file")
            i += 1
            if i >= len(args):
                return _usage(-1, "Missing value for -f")
            output_path = args[i]
        else:
            return _usage(-1, "Unrecognized flag")
        i += 1

    text = generate(seed, count)
    if output_path is None:
        sys.stdout.write(text)
        return 0
    try:
        with open(output_path, "w", encoding="utf-8") as handle:
            handle.write(text)
    except OSError:
        sys.stdout.write(f"{output_path}: open failed\n")
        return 1
    return 0