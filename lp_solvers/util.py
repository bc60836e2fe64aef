"""
Helpers for building problems.
"""

from collections import Counter


class UniqueNameGenerator:
    """
    Generates unique variable names that every solver accepts.

    Characters other than ASCII letters are dropped, an empty result becomes
    "v", and repeated stems get a counter starting at 2.

    Example:
        >>> names = UniqueNameGenerator()
        >>> names.add_variable("x"), names.add_variable("!#?/"), names.add_variable("x")
        ('x', 'v', 'x2')
    """

    def __init__(self):
        self._counts = Counter()

    def add_variable(self, name: str) -> str:
        """Return a valid name never returned before by this generator."""
        stem = "".join(c for c in name if c.isascii() and c.isalpha()) or "v"
        self._counts[stem] += 1
        n = self._counts[stem]
        if n >= 2:
            return f"{stem}{n}"
        return stem
