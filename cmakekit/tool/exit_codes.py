"""
Sets of process exit codes.

Exit codes to ignore are given as a string of comma
separated numbers and inclusive ranges, e.g. ``"20,21,50-70"``.
"""

import re
from typing import Iterator, List, Optional, Tuple

MAX_EXIT_CODE = 0xFFFF

_RANGE_RE = re.compile(r"\s*(\d+)(?:-(\d+))?\s*")


def _check_upper_limit(number: int) -> None:
    if number > MAX_EXIT_CODE:
        raise ValueError(f"Invalid number: {number} > {MAX_EXIT_CODE}")


class ExitCodeSet:
    """
    A set of exit codes in 0..65535.

    Example:
        >>> codes = ExitCodeSet("30,10,20-22")
        >>> codes.to_spec_string()
        '10,20-22,30'
        >>> 21 in codes
        True
    """

    def __init__(self, spec: Optional[str] = None):
        self._ranges: List[Tuple[int, int]] = []
        self.set_values(spec)

    def set_values(self, spec: Optional[str]) -> None:
        """
        Replace the contents from a range string.

        None or a blank string give an empty set.

        Raises:
            ValueError: If an element is not a number or range, a number
                exceeds 65535, or a range is reversed
        """
        if spec is None or not spec.strip():
            self._ranges = []
            return

        ranges = set()
        for expr in spec.split(","):
            match = _RANGE_RE.fullmatch(expr)
            if not match:
                raise ValueError(f"Invalid range specification: '{expr}'")
            lowest = int(match.group(1))
            _check_upper_limit(lowest)
            if match.group(2) is None:
                ranges.add((lowest, lowest))
                continue
            highest = int(match.group(2))
            _check_upper_limit(highest)
            if lowest > highest:
                raise ValueError(f"Invalid range specification: {lowest} > {highest}")
            ranges.add((lowest, highest))

        self._ranges = sorted(ranges)

    def is_empty(self) -> bool:
        return not self._ranges

    def __contains__(self, value: int) -> bool:
        return any(lo <= value <= hi for lo, hi in self._ranges)

    def __iter__(self) -> Iterator[int]:
        seen = set()
        for lo, hi in self._ranges:
            for value in range(lo, hi + 1):
                if value not in seen:
                    seen.add(value)
                    yield value

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __eq__(self, other) -> bool:
        if not isinstance(other, ExitCodeSet):
            return NotImplemented
        return self._ranges == other._ranges

    def to_spec_string(self) -> str:
        """Sorted, deduplicated range string ('' when empty)."""
        return ",".join(str(lo) if lo == hi else f"{lo}-{hi}" for lo, hi in self._ranges)

    def __repr__(self) -> str:
        return f"ExitCodeSet({self.to_spec_string()!r})"
