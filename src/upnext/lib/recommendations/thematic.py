"""Theme keywords derived from a collection's name.

A collection called "Christmas Movies" should pull recommendations towards
festive titles even though nothing in the related-items data says so.  The
name is split into meaningful tokens, and any theme from
:data:`THEME_EXPANSIONS` that the name mentions contributes its whole
expansion set.  Candidate text is then scored by how many of those keywords
it mentions.

Everything here is pure string work; no I/O.
"""

import re

# ---------------------------------------------------------------------------
# Static data
# ---------------------------------------------------------------------------

# Words that say nothing about what a collection is about.
STOPWORDS: frozenset[str] = frozenset({
    "list", "lists", "stuff", "things", "my", "the",
    "and", "for", "best", "top", "all", "time",
})

# Tokens shorter than this are dropped from a collection name.
MIN_TOKEN_LENGTH = 3

_CHRISTMAS = frozenset({
    "christmas", "xmas", "holiday", "santa", "reindeer",
    "snow", "grinch", "noel", "nutcracker",
})

# Theme name -> expansion terms.  Iteration order matters: when a name
# matches several themes, derive_search_query() uses the first one.
THEME_EXPANSIONS: dict[str, frozenset[str]] = {
    "christmas": _CHRISTMAS,
    "xmas": _CHRISTMAS,
    "holiday": frozenset({
        "christmas", "xmas", "holiday", "santa", "thanksgiving", "halloween",
    }),
    "halloween": frozenset({
        "halloween", "horror", "haunted", "ghost", "witch",
        "zombie", "vampire", "monster",
    }),
    "horror": frozenset({
        "horror", "scary", "haunted", "ghost", "slasher",
        "zombie", "vampire", "demon",
    }),
    "anime": frozenset({
        "anime", "manga", "japanese", "animation", "studio ghibli",
    }),
    "sci fi": frozenset({
        "sci fi", "science fiction", "space", "alien", "robot",
        "future", "dystopia",
    }),
    "romance": frozenset({
        "romance", "romantic", "love", "wedding", "valentine",
    }),
    "war": frozenset({
        "war", "military", "soldier", "battle", "army", "combat",
    }),
    "superhero": frozenset({
        "superhero", "marvel", "dc comics", "avengers", "batman", "spider man",
    }),
}

_WORD_RUN = re.compile(r"[^\W_]+")


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def normalize(text: str) -> str:
    """Lowercase *text* and collapse every run of non-alphanumerics to one space."""
    return " ".join(_WORD_RUN.findall(text.lower()))


def tokenize(text: str) -> list[str]:
    return normalize(text).split()


def _meaningful_tokens(words: list[str]) -> list[str]:
    return [w for w in words if len(w) >= MIN_TOKEN_LENGTH and w not in STOPWORDS]


def _matching_themes(name: str) -> list[str]:
    """Theme names mentioned by *name*, in table order."""
    words = set(tokenize(name))
    normalized = normalize(name)
    return [
        theme for theme in THEME_EXPANSIONS
        if all(w in words for w in theme.split()) or theme in normalized
    ]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def derive_keywords(name: str | None) -> frozenset[str]:
    """Return the theme keyword set for a collection called *name*.

    The set holds the name's meaningful tokens plus the expansions of every
    matching theme.  It is empty for a missing name or one made only of
    stopwords.
    """
    if not name:
        return frozenset()

    keywords = set(_meaningful_tokens(tokenize(name)))
    for theme in _matching_themes(name):
        for term in THEME_EXPANSIONS[theme]:
            normalized = normalize(term)
            if normalized:
                keywords.add(normalized)
    return frozenset(keywords)


def score(text: str, keywords: frozenset[str] | set[str]) -> int:
    """Count how many *keywords* occur in *text*.

    Single-word keywords must appear as a whole word.  A multi-word keyword
    matches either as a phrase or when all of its words appear anywhere.
    """
    if not keywords:
        return 0

    haystack = normalize(text)
    haystack_words = set(haystack.split())

    matched = 0
    for keyword in keywords:
        if " " in keyword:
            if keyword in haystack or all(w in haystack_words for w in keyword.split()):
                matched += 1
        elif keyword in haystack_words:
            matched += 1
    return matched


def derive_search_query(name: str | None) -> str:
    """Build a free-text search query from a collection name.

    Prefers the first theme the name mentions ("christmas" for
    "Christmas Movies"); otherwise joins the meaningful tokens.  An empty
    string means no fallback search is possible.
    """
    if not name:
        return ""

    themes = _matching_themes(name)
    if themes:
        return themes[0]
    return " ".join(_meaningful_tokens(tokenize(name)))
