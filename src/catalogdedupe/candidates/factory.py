"""Registry-based factory mapping bucketing strategies to blockers.

New strategies are added by extending ``STRATEGY_REGISTRY``.
"""

from __future__ import annotations

from enum import StrEnum

from catalogdedupe.candidates.blockers import (
    AllItemsBlocker,
    Blocker,
    FirstWordBlocker,
    MinHashTitleBlocker,
    PhoneticBlocker,
)


class BucketingStrategy(StrEnum):
    """How items are grouped before pairwise scoring.

    Attributes
    ----------
    PHONETIC : str
        Soundex code of the first significant title word.
    FIRST_WORD : str
        First significant title word.
    PHONETIC_FIRST_WORD : str
        Phonetic key primary, first word secondary (default).
    MINHASH : str
        MinHash LSH bands over title character trigrams.
    NONE : str
        One bucket holding every item.
    """

    PHONETIC = "phonetic"
    FIRST_WORD = "first_word"
    PHONETIC_FIRST_WORD = "phonetic_first_word"
    MINHASH = "minhash"
    NONE = "none"


# strategy → blocker classes, primary first
STRATEGY_REGISTRY: dict[BucketingStrategy, tuple[type, ...]] = {
    BucketingStrategy.PHONETIC: (PhoneticBlocker,),
    BucketingStrategy.FIRST_WORD: (FirstWordBlocker,),
    BucketingStrategy.PHONETIC_FIRST_WORD: (PhoneticBlocker, FirstWordBlocker),
    BucketingStrategy.MINHASH: (MinHashTitleBlocker,),
    BucketingStrategy.NONE: (AllItemsBlocker,),
}


def create_blockers(strategy: BucketingStrategy | str) -> list[Blocker]:
    """Instantiate the blockers for a bucketing strategy.

    Parameters
    ----------
    strategy : BucketingStrategy | str
        Strategy or its string value.

    Returns
    -------
    list[Blocker]
        Ready-to-use blocker instances.

    Raises
    ------
    ValueError
        If the strategy is unknown.
    """
    try:
        key = BucketingStrategy(strategy)
    except ValueError:
        valid = ", ".join(s.value for s in BucketingStrategy)
        raise ValueError(f"Unknown bucketing strategy: {strategy!r}. Valid: {valid}") from None
    return [cls() for cls in STRATEGY_REGISTRY[key]]
