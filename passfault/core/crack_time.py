"""
Time to crack - converts a password's search-space size into crack time.

Costs are log2 guess counts and all arithmetic stays in log space, so
astronomically large search spaces never overflow; they are shown with
number names ("3.2 billion") and switch to scientific notation past a
decillion.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .exceptions import InvalidThroughputConfiguration

LOG2_10 = math.log2(10)


@dataclass(frozen=True)
class HashFunction:
    """Hash type with the cracking speed of one unit (one current GPU)."""
    name: str
    description: str
    hashes_per_second: float


# Single high-end GPU benchmark figures, rounded.
HASH_SPEEDS: dict[str, HashFunction] = {
    h.name: h
    for h in (
        HashFunction("md5", "MD5", 164.0e9),
        HashFunction("sha1", "SHA1", 50.6e9),
        HashFunction("sha256", "SHA2-256", 22.0e9),
        HashFunction("sha512", "SHA2-512", 7.5e9),
        HashFunction("ntlm", "NTLM", 288.0e9),
        HashFunction("lm", "LM", 151.0e9),
        HashFunction("netntlmv2", "NetNTLMv2", 11.8e9),
        HashFunction("mysql", "MySQL4.1/MySQL5", 21.0e9),
        HashFunction("md5crypt", "md5crypt, MD5 (Unix)", 68.0e6),
        HashFunction("sha512crypt", "sha512crypt $6$, SHA512 (Unix)", 3.0e6),
        HashFunction("bcrypt", "bcrypt $2*$, Blowfish (Unix), cost 5", 184.0e3),
        HashFunction("wpa2", "WPA-PBKDF2-PMKID+EAPOL", 2.5e6),
    )
}


def lookup_hash_function(name: str) -> HashFunction | None:
    return HASH_SPEEDS.get(name.strip().lower())


@dataclass(frozen=True)
class ThroughputConfig:
    """
    Attacker guess rate: either an explicit rate, or a number of cracking
    units running a named hash function.

    Usage:
        ThroughputConfig(guesses_per_second=1e9)
        ThroughputConfig(units=8, hash_function="sha256")
    """
    guesses_per_second: float | None = None
    units: int | None = None
    hash_function: str | None = None

    def __post_init__(self) -> None:
        has_rate = self.guesses_per_second is not None
        has_units = self.units is not None or self.hash_function is not None
        if has_rate and has_units:
            raise InvalidThroughputConfiguration(
                "give either guesses_per_second, or units with hash_function, not both"
            )
        if has_rate:
            rate = self.guesses_per_second
            if isinstance(rate, bool) or not isinstance(rate, (int, float)) or not math.isfinite(rate) or rate <= 0:
                raise InvalidThroughputConfiguration(f"guesses_per_second must be a positive number, got {rate!r}")
            return
        if self.units is None or self.hash_function is None:
            raise InvalidThroughputConfiguration(
                "crack time needs guesses_per_second, or both units and hash_function"
            )
        if isinstance(self.units, bool) or not isinstance(self.units, int) or self.units < 1:
            raise InvalidThroughputConfiguration(f"units must be a positive integer, got {self.units!r}")
        if lookup_hash_function(self.hash_function) is None:
            known = ", ".join(sorted(HASH_SPEEDS))
            raise InvalidThroughputConfiguration(
                f"unknown hash function {self.hash_function!r} (known: {known})"
            )

    @property
    def hash_type(self) -> HashFunction | None:
        if self.hash_function is None:
            return None
        return lookup_hash_function(self.hash_function)

    @property
    def crack_speed(self) -> float:
        """Guesses per second."""
        if self.guesses_per_second is not None:
            return float(self.guesses_per_second)
        hash_type = self.hash_type
        if self.units is None or hash_type is None:
            raise InvalidThroughputConfiguration("crack time needs guesses_per_second, or both units and hash_function")
        return self.units * hash_type.hashes_per_second


@dataclass(frozen=True)
class CrackTimeEstimate:
    """Guess count and exhaustive-search duration for one password."""
    total_cost: float
    crack_speed: float
    seconds_log2: float

    @property
    def guesses_log2(self) -> float:
        return self.total_cost

    @property
    def guesses(self) -> float:
        return _pow2(self.total_cost)

    @property
    def seconds(self) -> float:
        """Duration in seconds; ``inf`` when beyond float range."""
        return _pow2(self.seconds_log2)

    @property
    def guesses_display(self) -> str:
        return rounded_size_string(self.total_cost)

    @property
    def duration_display(self) -> str:
        return duration_string(self.seconds_log2)

    def to_dict(self) -> dict[str, Any]:
        return {
            "guesses_log2": round(self.total_cost, 4),
            "guesses": self.guesses_display,
            "crack_speed": self.crack_speed,
            "seconds": self.seconds,
            "duration": self.duration_display,
        }


def crack_time(total_cost: float, throughput: ThroughputConfig) -> CrackTimeEstimate:
    """Estimate the time to search ``2 ** total_cost`` guesses at the configured rate."""
    if total_cost < 0 or math.isnan(total_cost):
        raise ValueError(f"total_cost must be >= 0, got {total_cost!r}")
    speed = throughput.crack_speed
    return CrackTimeEstimate(
        total_cost=total_cost,
        crack_speed=speed,
        seconds_log2=total_cost - math.log2(speed),
    )


def _pow2(exponent: float) -> float:
    try:
        return 2.0 ** exponent
    except OverflowError:
        return math.inf


_NUMBER_NAMES = (
    (33, "decillion"),
    (30, "nonillion"),
    (27, "octillion"),
    (24, "septillion"),
    (21, "sextillion"),
    (18, "quintillion"),
    (15, "quadrillion"),
    (12, "trillion"),
    (9, "billion"),
    (6, "million"),
    (3, "thousand"),
)


def rounded_size_string(log2_value: float) -> str:
    """Human readable ``2 ** log2_value``: "950", "3.2 million", "~4.1e+52"."""
    log10_value = log2_value / LOG2_10 + 1e-9  # absorb float error at exact powers of ten
    if log10_value < 3:
        return str(round(10 ** log10_value))
    for exponent, name in _NUMBER_NAMES:
        if log10_value >= exponent:
            if log10_value >= 36:
                break
            return f"{10 ** (log10_value - exponent):.1f} {name}"
    exponent = math.floor(log10_value)
    mantissa = 10 ** (log10_value - exponent)
    if mantissa >= 9.95:
        mantissa, exponent = 1.0, exponent + 1
    return f"~{mantissa:.1f}e+{exponent}"


_MINUTE = 60.0
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_MONTH = 30.4375 * _DAY
_YEAR = 365.25 * _DAY
_CENTURY = 100 * _YEAR

_DURATION_UNITS = (
    (_CENTURY, "centuries"),
    (_YEAR, "years"),
    (_MONTH, "months"),
    (_DAY, "days"),
    (_HOUR, "hours"),
    (_MINUTE, "minutes"),
)


def duration_string(seconds_log2: float) -> str:
    """Human readable duration of ``2 ** seconds_log2`` seconds."""
    if seconds_log2 < 0:
        return "less than a second"
    years_log2 = seconds_log2 - math.log2(_YEAR)
    if years_log2 / LOG2_10 >= 5:
        return f"{rounded_size_string(years_log2)} years"
    seconds = 2.0 ** seconds_log2
    for size, name in _DURATION_UNITS:
        if seconds >= size:
            return f"{seconds / size:.1f} {name}"
    return f"{seconds:.1f} seconds"
