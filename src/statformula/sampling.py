"""Random sampling over unions of inclusive integer ranges."""

import random
from typing import Any, Mapping, Optional, Sequence, Union

RangeLike = Union[Sequence[int], Mapping[str, int]]

DIGITS = [(48, 57)]
LETTERS = [(65, 90), (97, 122)]
SPECIAL_CHARACTERS = [(33, 47), (58, 64), (91, 96), (123, 126)]

SAMPLING_MODES = ("default", "sort", "combine")


def normalize_range(value: RangeLike) -> tuple[int, int]:
    """
    Convert ``(a, b)`` or ``{"min": a, "max": b}`` to an ordered ``(min, max)``.

    Reversed bounds are swapped.
    """
    if isinstance(value, Mapping):
        low, high = value["min"], value["max"]
    else:
        low, high = value
    return (low, high) if low <= high else (high, low)


def merge_ranges(ranges: Sequence[RangeLike]) -> list[tuple[int, int]]:
    """
    Merge overlapping inclusive ranges.

    Args:
        ranges: Ranges in any order

    Returns:
        Sorted, non-overlapping ranges covering the same values
    """
    merged: list[tuple[int, int]] = []
    for low, high in sorted(normalize_range(r) for r in ranges):
        if merged and merged[-1][1] >= low:
            merged[-1] = (merged[-1][0], max(merged[-1][1], high))
        else:
            merged.append((low, high))
    return merged


def random_int(low: int, high: int, rng: Optional[random.Random] = None) -> int:
    """Random integer in ``[low, high]``."""
    return (rng or random).randint(low, high)


def random_index(*ranges: RangeLike, mode: str = "combine", rng: Optional[random.Random] = None) -> int:
    """
    Draw a value uniformly from the union of inclusive ranges.

    The ranges are laid end to end, an index is drawn over their total size
    and mapped back to its value. For example index 4 over [1, 3] and
    [7, 13] is 8.

    Args:
        ranges: ``(min, max)`` pairs or ``{"min", "max"}`` mappings
        mode: "default" uses the ranges as given (overlaps count twice),
            "sort" only orders them, "combine" merges overlaps first
        rng: Optional random generator, for reproducible draws

    Returns:
        The drawn value
    """
    if mode not in SAMPLING_MODES:
        raise ValueError(f"Unknown sampling mode: {mode!r} (expected one of {SAMPLING_MODES})")
    if not ranges:
        raise ValueError("At least one range is required")

    if mode == "combine":
        intervals = merge_ranges(ranges)
    elif mode == "sort":
        intervals = sorted(normalize_range(r) for r in ranges)
    else:
        intervals = [normalize_range(r) for r in ranges]

    total = sum(high - low + 1 for low, high in intervals)
    index = random_int(0, total - 1, rng)
    for low, high in intervals:
        count = high - low + 1
        if index < count:
            return low + index
        index -= count

    # Unreachable: index < total
    raise AssertionError("Drawn index fell outside every range")


def random_string(
    length: int,
    numbers: bool = True,
    letters: bool = True,
    special: bool = False,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Generate a random ASCII string.

    Args:
        length: Number of characters
        numbers: Include digits
        letters: Include upper and lower case letters
        special: Include printable punctuation

    Returns:
        The generated string
    """
    ranges: list[tuple[int, int]] = []
    if numbers:
        ranges.extend(DIGITS)
    if letters:
        ranges.extend(LETTERS)
    if special:
        ranges.extend(SPECIAL_CHARACTERS)
    if not ranges:
        raise ValueError("At least one character class must be enabled")

    return "".join(chr(random_index(*ranges, mode="default", rng=rng)) for _ in range(length))


def random_element(items: Sequence[Any], count: int = 1, rng: Optional[random.Random] = None) -> Any:
    """
    Pick random elements (with replacement).

    Returns:
        None if count < 1, a single element if count == 1, otherwise a list
    """
    if count < 1:
        return None
    chooser = rng or random
    if count == 1:
        return chooser.choice(items)
    return [chooser.choice(items) for _ in range(count)]
