"""Free-text similarity used to judge title and artist guesses.

Normalization (applied to both sides before comparing):

- Unicode NFKD folding with combining marks dropped ("Beyoncé" -> "beyonce")
- lowercase
- apostrophes removed ("Don't" -> "dont")
- any other character that is not a letter, digit or whitespace becomes a space
- whitespace collapsed and trimmed
- one leading article ("the", "a", "an") dropped when another word follows

The ratio is ``difflib.SequenceMatcher`` over the normalized strings, taken in
both argument orders and maximised so the result is symmetric. If either side
normalizes to an empty string the similarity is 0.0, including ``("", "")``.
"""

import difflib
import re
import unicodedata

ARTICLES = frozenset({"the", "a", "an"})

_APOSTROPHES = re.compile(r"['’]")
_NON_WORD = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    if not text:
        return ""
    folded = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    lowered = _APOSTROPHES.sub("", folded.lower())
    cleaned = _NON_WORD.sub(" ", lowered)
    words = _WHITESPACE.sub(" ", cleaned).strip().split(" ")
    if len(words) > 1 and words[0] in ARTICLES:
        words = words[1:]
    return " ".join(words)


def _ratio(a: str, b: str) -> float:
    return difflib.SequenceMatcher(None, a, b, autojunk=False).ratio()


def similarity(a: str, b: str) -> float:
    na, nb = normalize(a), normalize(b)
    if not na or not nb:
        return 0.0
    if na == nb:
        return 1.0
    return max(_ratio(na, nb), _ratio(nb, na))
