"""
Crowd level scales.

Two incompatible level taxonomies exist for the same concept. Both are kept,
tagged by LevelScale, with an explicit mapping from the triad scale onto the
canonical quad scale.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple


class LevelScale(Enum):
    QUAD = "quad"
    TRIAD = "triad"


class CrowdLevel(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TriadLevel(Enum):
    SAFE = "SAFE"
    MEDIUM = "MEDIUM"
    OVERFLOW = "OVERFLOW"


TRIAD_TO_QUAD = {
    TriadLevel.SAFE: CrowdLevel.LOW,
    TriadLevel.MEDIUM: CrowdLevel.MEDIUM,
    TriadLevel.OVERFLOW: CrowdLevel.CRITICAL,
}

SEVERITY = {
    CrowdLevel.LOW: 0,
    CrowdLevel.MEDIUM: 1,
    CrowdLevel.HIGH: 2,
    CrowdLevel.CRITICAL: 3,
}

KNOWN_LEVEL_NAMES = frozenset(
    [level.value for level in CrowdLevel] + [level.value for level in TriadLevel]
)


@dataclass(frozen=True)
class ScaleDefinition:
    """
    Ordered levels separated by breakpoints.

    upper_inclusive=True:  score <= bp[i] -> levels[i]   (quad)
    upper_inclusive=False: score <  bp[i] -> levels[i]   (triad, i.e. score >= bp moves up)
    """
    scale: LevelScale
    levels: Tuple[Enum, ...]
    breakpoints: Tuple[float, ...]
    upper_inclusive: bool

    def level_for(self, score: float) -> Enum:
        for bp, level in zip(self.breakpoints, self.levels):
            if (score <= bp) if self.upper_inclusive else (score < bp):
                return level
        return self.levels[-1]


def quad_scale(breakpoints: Sequence[float]) -> ScaleDefinition:
    return ScaleDefinition(
        scale=LevelScale.QUAD,
        levels=(CrowdLevel.LOW, CrowdLevel.MEDIUM, CrowdLevel.HIGH, CrowdLevel.CRITICAL),
        breakpoints=tuple(breakpoints),
        upper_inclusive=True,
    )


def triad_scale(breakpoints: Sequence[float]) -> ScaleDefinition:
    return ScaleDefinition(
        scale=LevelScale.TRIAD,
        levels=(TriadLevel.SAFE, TriadLevel.MEDIUM, TriadLevel.OVERFLOW),
        breakpoints=tuple(breakpoints),
        upper_inclusive=False,
    )


def to_quad(level: Enum) -> CrowdLevel:
    if isinstance(level, TriadLevel):
        return TRIAD_TO_QUAD[level]
    return level


def severity(level: Enum) -> int:
    return SEVERITY[to_quad(level)]


def quad_of(name: str) -> CrowdLevel:
    """Level name from either scale -> canonical quad level."""
    if name in CrowdLevel.__members__:
        return CrowdLevel[name]
    return TRIAD_TO_QUAD[TriadLevel[name]]
