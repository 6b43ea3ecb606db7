# ABOUTME: Text canonicalization for catalog comparisons and fallback search phrases.
# ABOUTME: Folds case and Cyrillic letter variants, strips punctuation, filters stopwords.

import re

# Runs of anything that is not a letter or digit (underscore counts as punctuation).
_NON_WORD_RE = re.compile(r"[\W_]+")
_WHITESPACE_RE = re.compile(r"\s+")
# Series, subtitle and edition noise starts at the first of these separators.
_TITLE_CUT_RE = re.compile(r"[.:—–(]| - ")

_LETTER_FOLDS = str.maketrans({"ё": "е"})

# A query shorter than this (in characters, after normalization) is unusable.
MIN_QUERY_CHARS = 6
# A query with fewer words than this is too vague to search with.
MIN_QUERY_WORDS = 2
# Fallback phrases keep at most this many tokens.
MAX_FALLBACK_TOKENS = 8
# Shorter tokens carry no search value.
_MIN_TOKEN_CHARS = 3
# A short title is only used when it keeps at least this many characters.
_MIN_SHORT_TITLE_CHARS = 4

# Russian function words in normalized form: prepositions, conjunctions,
# particles, pronouns and demonstratives. Title words such as "книга" or
# "рассказ" are absent on purpose; they can be part of a real title.
RUSSIAN_STOPWORDS = frozenset(
    {
        "без", "более", "будто", "был", "была", "были", "было", "быть",
        "вам", "вас", "весь", "вот", "все", "всех", "где", "даже",
        "для", "его", "ее", "если", "есть", "еще", "жил",
        "или", "как", "какая", "какой", "когда", "кто", "ли", "между",
        "меня", "мне", "много", "может", "мой", "над", "надо", "нас",
        "него", "нее", "нет", "них", "ничего", "она", "они",
        "оно", "очень", "перед", "под", "после", "потом", "потому", "при",
        "про", "раз", "сам", "себе", "себя", "со", "так", "также", "там",
        "тебя", "тем", "то", "того", "тоже", "той", "только", "том", "тот",
        "тут", "уже", "хотя", "чем", "через", "что", "чтобы", "чье", "чья",
        "эта", "эти", "это", "этого", "этой", "этом", "этот", "которая",
        "которое", "который", "которые", "котором", "помню",
        "вроде", "кажется", "около", "почти", "свой", "своей", "свою",
    }
)


def normalize(text: str | None) -> str:
    """Canonicalize text for equality and containment checks.

    Lowercases, folds 'ё' to 'е', collapses every run of non-letter,
    non-digit characters to a single space, and trims.
    """
    if not text:
        return ""
    folded = text.lower().translate(_LETTER_FOLDS)
    return _NON_WORD_RE.sub(" ", folded).strip()


def collapse_whitespace(text: str | None) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def is_bad_query(query: str | None) -> bool:
    """Whether a search phrase is too short or too vague to be worth issuing."""
    normalized = normalize(query)
    if len(normalized) < MIN_QUERY_CHARS:
        return True
    return len(normalized.split()) < MIN_QUERY_WORDS


def build_fallback_query(
    free_text: str,
    stopwords: frozenset[str] = RUSSIAN_STOPWORDS,
    max_tokens: int = MAX_FALLBACK_TOKENS,
) -> str:
    """Build a search phrase from raw user text when the model's query is unusable.

    Keeps the first max_tokens distinct tokens that are at least three
    characters long and not stopwords. If that phrase would itself be a bad
    query, the whitespace-collapsed original text is returned instead.
    """
    tokens: list[str] = []
    seen: set[str] = set()
    for token in normalize(free_text).split():
        if len(token) < _MIN_TOKEN_CHARS or token in stopwords or token in seen:
            continue
        seen.add(token)
        tokens.append(token)
        if len(tokens) >= max_tokens:
            break

    phrase = " ".join(tokens)
    if is_bad_query(phrase):
        return collapse_whitespace(free_text)
    return phrase


def short_title(title: str | None) -> str:
    """Drop series, subtitle and edition noise from a title.

    "Дюна. Книга 1" becomes "Дюна"; "Solaris (1961)" becomes "Solaris".
    The full title is kept when the cut would leave fewer than four
    characters.
    """
    full = (title or "").strip()
    if not full:
        return ""
    cut = _TITLE_CUT_RE.split(full, maxsplit=1)[0].strip()
    return cut if len(cut) >= _MIN_SHORT_TITLE_CHARS else full
