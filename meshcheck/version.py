"""Major/minor version numbers for control planes and clusters."""

from __future__ import annotations

import re
from dataclasses import dataclass

_NUMBER = re.compile(r"[+-]?\d+")


@dataclass(frozen=True, order=True)
class Version:
    """A version reduced to its major and minor components."""

    major: int
    minor: int

    def equals(self, other: Version) -> bool:
        return self.major == other.major and self.minor == other.minor

    def less_than(self, other: Version) -> bool:
        if self.major != other.major:
            return self.major < other.major
        return self.minor < other.minor

    def less_than_or_equal(self, other: Version) -> bool:
        return self.less_than(other) or self.equals(other)

    def greater_than(self, other: Version) -> bool:
        return not self.less_than_or_equal(other)

    def greater_than_or_equal(self, other: Version) -> bool:
        return not self.less_than(other)

    def __str__(self) -> str:
        return f"v{self.major}.{self.minor}"


def parse_version(version: str) -> Version:
    """Parse strings such as ``v2.1``, ``v2.1.0`` or ``4.10.0``.

    Raises ValueError when the text has no numeric major and minor part.
    """
    text = version[1:] if version.startswith("v") else version
    parts = text.split(".")
    if len(parts) < 2:
        raise ValueError(f"invalid version: {text}")
    major_text, minor_text = parts[0], parts[1]
    if not (_NUMBER.fullmatch(major_text) and _NUMBER.fullmatch(minor_text)):
        raise ValueError(f"invalid version: {text}")
    return Version(major=int(major_text), minor=int(minor_text))


OCP_4_9 = parse_version("4.9.0")
OCP_4_10 = parse_version("4.10.0")
OCP_4_11 = parse_version("4.11.0")
OCP_4_12 = parse_version("4.12.0")
OCP_4_13 = parse_version("4.13.0")
OCP_4_14 = parse_version("4.14.0")

SMCP_2_0 = parse_version("v2.0")
SMCP_2_1 = parse_version("v2.1")
SMCP_2_2 = parse_version("v2.2")
SMCP_2_3 = parse_version("v2.3")
SMCP_2_4 = parse_version("v2.4")
SMCP_2_5 = parse_version("v2.5")