"""Description merging for leveled variants.

Leveled variants (tiers of the same gift, perk, etc.) share a description
that differs only in its numbers. ``merge_descriptions`` folds them into one
string, listing the values that differ:

    "Deal 5 damage", "Deal 8 damage"  ->  "Deal [5,8] damage"
"""

import re
from typing import Sequence

from data_miner.errors import CombineError, DescriptionMismatchError

NUMBER_RE = re.compile(r"\d*\.?\d+")
TEMPLATE_PLACEHOLDER = "#"


def numeric_tokens(text: str) -> list[str]:
    return NUMBER_RE.findall(text)


def description_template(text: str) -> str:
    """Return ``text`` with every numeric token replaced by ``#``."""
    return NUMBER_RE.sub(TEMPLATE_PLACEHOLDER, text)


def merge_descriptions(descriptions: Sequence[str]) -> str:
    """Merge per-variant descriptions that differ only in numeric tokens.

    Tokens equal across every variant are kept verbatim; differing tokens are
    rendered as ``[a,b,c]`` in variant order. The text around the tokens is
    taken from the first variant.

    Raises:
        CombineError: no descriptions were given.
        DescriptionMismatchError: the variants carry different token counts.
    """
    if not descriptions:
        raise CombineError("Cannot merge an empty set of descriptions")

    first = descriptions[0]
    if len(descriptions) == 1:
        return first

    token_lists = [numeric_tokens(d) for d in descriptions]
    counts = {len(tokens) for tokens in token_lists}
    if len(counts) != 1:
        raise DescriptionMismatchError(
            f"Numeric token count differs between variants: {list(descriptions)!r}"
        )

    parts = []
    last = 0
    for i, match in enumerate(NUMBER_RE.finditer(first)):
        parts.append(first[last : match.start()])
        values = [tokens[i] for tokens in token_lists]
        if all(v == values[0] for v in values):
            parts.append(values[0])
        else:
            parts.append("[" + ",".join(values) + "]")
        last = match.end()
    parts.append(first[last:])
    return "".join(parts)
