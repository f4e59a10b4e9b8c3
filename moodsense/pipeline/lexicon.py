"""Fixed English lexicon used by the signal extractor and the valence scorer.

Tokens are stored in *normalised* form: lower-case, apostrophes removed
(``don't`` → ``dont``), every other punctuation character treated as a
word boundary. Each keyword belongs to exactly one mood so that matching
is deterministic.
"""

from __future__ import annotations

import re

from moodsense.mood.model import MoodLabel

__all__ = [
    "AFFIRMATIVE_REPLIES",
    "DIMINISHER_PHRASES",
    "DIMINISHER_WORDS",
    "EMOJI_MOODS",
    "GREETING_WORDS",
    "INTENSIFIER_WORDS",
    "INTERROGATIVE_WORDS",
    "KEYWORD_INDEX",
    "MOOD_KEYWORDS",
    "MOOD_PHRASES",
    "NEGATION_MAP",
    "NEGATION_WORDS",
    "NEGATIVE_REPLIES",
    "NEGATIVE_REPLY_LEADS",
    "PHRASE_INDEX",
    "normalize_tokens",
]

_APOSTROPHE_RE = re.compile(r"['’‘`]")
_NON_WORD_RE = re.compile(r"[^\w\s]|_")


def normalize_tokens(text: str) -> list[str]:
    """Lower-case *text*, drop apostrophes, split on anything else."""
    lowered = _APOSTROPHE_RE.sub("", text.lower())
    return _NON_WORD_RE.sub(" ", lowered).split()


# ═══════════════════════════════════════════════════════════════════
# Keyword tables
# ═══════════════════════════════════════════════════════════════════

MOOD_KEYWORDS: dict[MoodLabel, frozenset[str]] = {
    MoodLabel.HAPPY: frozenset({
        "happy", "glad", "good", "great", "cheerful", "pleased", "delighted",
        "joy", "joyful", "wonderful", "nice", "awesome", "lovely", "fun",
        "smile", "smiling", "yay", "beautiful", "perfect", "excellent",
        "pleasant", "delightful", "superb", "terrific", "fabulous", "proud",
        "haha", "lol",
    }),
    MoodLabel.EXCITED: frozenset({
        "excited", "exciting", "amazing", "fantastic", "incredible", "thrilled",
        "wow", "pumped", "stoked", "ecstatic", "brilliant", "spectacular",
        "magnificent", "outstanding", "marvelous", "stunning", "woohoo",
        "hyped", "unbelievable",
    }),
    MoodLabel.SAD: frozenset({
        "sad", "down", "depressed", "unhappy", "cry", "crying", "cried",
        "miserable", "lonely", "heartbroken", "exhausted", "drained",
        "hopeless", "gloomy", "upset", "terrible", "awful", "horrible",
        "bad", "worst", "tragic", "devastated", "depressing", "grief",
        "tired", "hurt", "lost",
    }),
    MoodLabel.ANGRY: frozenset({
        "angry", "mad", "furious", "hate", "rage", "pissed", "livid",
        "outraged", "disgusting", "disgusted", "pathetic", "infuriating",
        "furious", "hostile",
    }),
    MoodLabel.ANXIOUS: frozenset({
        "worried", "worry", "nervous", "anxious", "anxiety", "scared",
        "afraid", "stressed", "stress", "stressful", "panic", "panicking",
        "overwhelmed", "tense", "fear", "terrified", "uneasy", "pressure",
        "dread",
    }),
    MoodLabel.LOVING: frozenset({
        "love", "loving", "adore", "affection", "cherish", "sweetheart",
        "darling", "hug", "hugs", "grateful", "thankful", "caring",
        "kiss", "beloved",
    }),
    MoodLabel.FRUSTRATED: frozenset({
        "frustrated", "frustrating", "annoyed", "annoying", "irritated",
        "ugh", "argh", "stuck", "useless", "ridiculous", "tedious",
    }),
    MoodLabel.PEACEFUL: frozenset({
        "calm", "peaceful", "serene", "relaxed", "relaxing", "tranquil",
        "chill", "content", "zen", "rested", "cozy", "quiet",
    }),
    MoodLabel.CONFUSED: frozenset({
        "confused", "confusing", "unsure", "puzzled", "baffled", "wondering",
        "huh", "unclear", "weird",
    }),
    MoodLabel.NEUTRAL: frozenset({
        "ok", "okay", "fine", "alright", "meh", "whatever",
    }),
}

# Multi-word phrases weigh more than single keywords. Some contain
# negation words on purpose; they are matched as a whole and never
# re-negated.
MOOD_PHRASES: dict[MoodLabel, tuple[str, ...]] = {
    MoodLabel.HAPPY: (
        "feeling good", "feel good", "pretty good", "going well", "doing great",
        "things are good", "having a good day", "made my day", "really good",
        "quite good", "looking good",
    ),
    MoodLabel.EXCITED: (
        "cant wait", "over the moon", "sun is shining", "life is beautiful",
        "so pumped", "best day ever", "on top of the world",
    ),
    MoodLabel.SAD: (
        "feeling down", "feel down", "broke my heart", "feel like crying",
        "want to cry", "feel empty", "let down", "miss them",
    ),
    MoodLabel.ANGRY: (
        "pissed off", "hate this", "drives me crazy", "so angry", "makes me mad",
        "fed up with you",
    ),
    MoodLabel.ANXIOUS: (
        "freaking out", "on edge", "cant sleep", "what if", "stressed out",
        "worried about",
    ),
    MoodLabel.LOVING: (
        "love you", "miss you", "care about", "thank you so much", "means a lot",
        "love it",
    ),
    MoodLabel.FRUSTRATED: (
        "fed up", "sick of", "sick and tired", "nothing works", "give up",
        "doesnt work", "not working",
    ),
    MoodLabel.PEACEFUL: (
        "at peace", "feeling calm", "taking it easy", "not bad", "all good",
        "slow morning",
    ),
    MoodLabel.CONFUSED: (
        "dont understand", "dont get it", "no idea", "makes no sense",
        "not sure", "doesnt make sense",
    ),
    MoodLabel.NEUTRAL: (
        "good morning", "good night", "good evening", "good afternoon",
        "how are you", "how is it going", "whats up",
    ),
}

EMOJI_MOODS: dict[str, MoodLabel] = {
    "😊": MoodLabel.HAPPY, "😄": MoodLabel.HAPPY, "😁": MoodLabel.HAPPY,
    "🙂": MoodLabel.HAPPY, "😂": MoodLabel.HAPPY,
    "🎉": MoodLabel.EXCITED, "🤩": MoodLabel.EXCITED, "🚀": MoodLabel.EXCITED,
    "😢": MoodLabel.SAD, "😭": MoodLabel.SAD, "💔": MoodLabel.SAD, "😞": MoodLabel.SAD,
    "😠": MoodLabel.ANGRY, "😡": MoodLabel.ANGRY, "🤬": MoodLabel.ANGRY,
    "😰": MoodLabel.ANXIOUS, "😨": MoodLabel.ANXIOUS, "😱": MoodLabel.ANXIOUS,
    "🥰": MoodLabel.LOVING, "❤": MoodLabel.LOVING, "💕": MoodLabel.LOVING, "😍": MoodLabel.LOVING,
    "😤": MoodLabel.FRUSTRATED, "🙄": MoodLabel.FRUSTRATED,
    "😌": MoodLabel.PEACEFUL, "🧘": MoodLabel.PEACEFUL,
    "🤔": MoodLabel.CONFUSED, "😕": MoodLabel.CONFUSED,
    "😐": MoodLabel.NEUTRAL,
}

KEYWORD_INDEX: dict[str, MoodLabel] = {
    word: mood for mood, words in MOOD_KEYWORDS.items() for word in words
}

# first token → [(phrase tokens, mood)], longest phrase first
PHRASE_INDEX: dict[str, list[tuple[tuple[str, ...], MoodLabel]]] = {}
for _mood, _phrases in MOOD_PHRASES.items():
    for _phrase in _phrases:
        _tokens = tuple(_phrase.split())
        PHRASE_INDEX.setdefault(_tokens[0], []).append((_tokens, _mood))
for _entries in PHRASE_INDEX.values():
    _entries.sort(key=lambda entry: len(entry[0]), reverse=True)


# ═══════════════════════════════════════════════════════════════════
# Modifiers
# ═══════════════════════════════════════════════════════════════════

NEGATION_WORDS: frozenset[str] = frozenset({
    "not", "no", "never", "nothing", "nobody", "nowhere", "neither", "nor",
    "cant", "cannot", "wont", "dont", "doesnt", "didnt", "isnt", "arent",
    "wasnt", "werent", "havent", "hasnt", "hardly", "barely", "aint",
})

INTENSIFIER_WORDS: frozenset[str] = frozenset({
    "so", "very", "really", "extremely", "super", "totally", "incredibly",
    "absolutely", "truly", "deeply", "insanely", "utterly",
})

DIMINISHER_WORDS: frozenset[str] = frozenset({
    "slightly", "somewhat", "kinda", "sorta", "barely", "mildly", "little",
})

DIMINISHER_PHRASES: frozenset[tuple[str, str]] = frozenset({
    ("a", "bit"), ("a", "little"), ("kind", "of"), ("sort", "of"),
})

# Negated mood → (replacement mood, weight factor). Fixed, not learned.
NEGATION_MAP: dict[MoodLabel, tuple[MoodLabel, float]] = {
    MoodLabel.HAPPY: (MoodLabel.SAD, 0.6),
    MoodLabel.EXCITED: (MoodLabel.NEUTRAL, 0.5),
    MoodLabel.LOVING: (MoodLabel.SAD, 0.5),
    MoodLabel.PEACEFUL: (MoodLabel.ANXIOUS, 0.6),
    MoodLabel.SAD: (MoodLabel.NEUTRAL, 0.5),
    MoodLabel.ANGRY: (MoodLabel.NEUTRAL, 0.5),
    MoodLabel.ANXIOUS: (MoodLabel.PEACEFUL, 0.5),
    MoodLabel.FRUSTRATED: (MoodLabel.NEUTRAL, 0.5),
    MoodLabel.CONFUSED: (MoodLabel.NEUTRAL, 0.5),
    MoodLabel.NEUTRAL: (MoodLabel.NEUTRAL, 1.0),
}


# ═══════════════════════════════════════════════════════════════════
# Structural cues
# ═══════════════════════════════════════════════════════════════════

INTERROGATIVE_WORDS: frozenset[str] = frozenset({
    "what", "how", "why", "when", "where", "who", "which", "whats", "hows",
})

GREETING_WORDS: frozenset[str] = frozenset({
    "hello", "hi", "hey", "hiya", "yo", "morning", "evening", "sup",
    "greetings", "howdy", "there", "bye", "goodbye", "thanks", "thank", "you",
})

AFFIRMATIVE_REPLIES: frozenset[str] = frozenset({
    "yes", "yeah", "yep", "yup", "same", "exactly", "definitely", "indeed",
    "true", "agreed", "right", "me", "too",
})

# A negative reply starts with one of the leads and uses only these words.
NEGATIVE_REPLY_LEADS: frozenset[str] = frozenset({"no", "nope", "nah", "not", "never"})
NEGATIVE_REPLIES: frozenset[str] = NEGATIVE_REPLY_LEADS | {"really", "quite", "at", "all"}
