#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/utils/keys.py
"""Unique key generation for blocks, table rows, columns and cells."""

from __future__ import annotations

import itertools
import random
from typing import Callable

from html2draft.constants import DEFAULT_KEY_LENGTH, KEY_ALPHABET

KeyFactory = Callable[[], str]


class KeyGenerator:
    """Zero-argument generator of random keys, unique per instance.

    Keys are short base-32 strings. Every key handed out is remembered so
    the same instance never repeats itself.

    Parameters
    ----------
    length : int, default = 5
        Number of characters per key
    seed : int or None, default = None
        Seed for the underlying random source, for reproducible keys

    Examples
    --------
    >>> gen = KeyGenerator(seed=7)
    >>> a, b = gen(), gen()
    >>> a != b
    True

    """

    def __init__(self, length: int = DEFAULT_KEY_LENGTH, seed: int | None = None):
        """Initialize the generator."""
        if length < 1:
            raise ValueError(f"length must be positive, got {length}")
        self.length = length
        self._random = random.Random(seed)
        self._seen: set[str] = set()

    def __call__(self) -> str:
        """Return a key this generator has not produced before."""
        while True:
            key = "".join(self._random.choice(KEY_ALPHABET) for _ in range(self.length))
            if key not in self._seen:
                self._seen.add(key)
                return key


class SequentialKeyGenerator:
    """Deterministic key factory producing ``prefix0``, ``prefix1``, ..."""

    def __init__(self, prefix: str = "k"):
        """Initialize the counter."""
        self.prefix = prefix
        self._counter = itertools.count()

    def __call__(self) -> str:
        """Return the next key in sequence."""
        return f"{self.prefix}{next(self._counter)}"


_default_generator = KeyGenerator()


def generate_random_key() -> str:
    """Return a fresh key from the process-wide generator."""
    return _default_generator()
