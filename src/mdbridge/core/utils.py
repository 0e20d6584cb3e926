"""Text helpers shared by the conversion core."""

import re
import unicodedata


def slugify(text: str) -> str:
    """
    Convert heading text to an anchor-safe slug.

    - Lowercase
    - Unicode normalize (NFKD), drop combining marks
    - Remove punctuation except spaces and hyphens
    - Collapse whitespace and hyphen runs to a single `-`

    Examples:
        >>> slugify("Parallel transport")
        'parallel-transport'
        >>> slugify("Riemann–Christoffel symbols")
        'riemann-christoffel-symbols'
    """
    text = text.lower()
    text = text.replace('–', '-').replace('—', '-').replace('−', '-')

    text = unicodedata.normalize('NFKD', text)
    text = ''.join(c for c in text if not unicodedata.combining(c))

    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'\s+', '-', text)
    text = re.sub(r'-+', '-', text)

    return text.strip('-')


def unique_slug(text: str, taken: set[str], fallback: str = "heading") -> str:
    """Slug of `text` not present in `taken`, suffixed `-1`, `-2`, ... on collision."""
    base = slugify(text) or fallback
    candidate = base
    n = 0
    while candidate in taken:
        n += 1
        candidate = f"{base}-{n}"
    return candidate
