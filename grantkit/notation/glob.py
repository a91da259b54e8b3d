"""
Glob notation for attribute filtering.

An attribute glob is a dotted path such as "name", "account.*" or "*",
optionally negated with a leading "!". Each segment is matched against the
keys of a mapping with fnmatch, so "*" matches any key at its level.

Globs are applied loose to verbose: shallower paths before deeper ones,
wildcard-terminated paths before exact ones, and positive globs before
negated ones. Given ["car.model", "*", "!car.*"] the order is
["*", "!car.*", "car.model"], which keeps every top level key, empties `car`
and then restores `car.model`.
"""

import copy
import fnmatch
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Tuple

from ..types.errors import AccessControlError, INVALID_SHAPE


def _has_magic(segment: str) -> bool:
    return any(c in segment for c in '*?[')


class Glob:
    """A single, parsed attribute glob."""

    def __init__(self, glob: str):
        if not isinstance(glob, str) or glob.strip() == '':
            raise AccessControlError(f"Invalid glob notation: {glob!r}", INVALID_SHAPE)
        self.glob = glob.strip()
        self.negated = self.glob.startswith('!')
        self.path = self.glob[1:] if self.negated else self.glob
        if self.path == '':
            raise AccessControlError(f"Invalid glob notation: {glob!r}", INVALID_SHAPE)
        self.segments: Tuple[str, ...] = tuple(self.path.split('.'))

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        return (
            self.depth,
            0 if _has_magic(self.segments[-1]) else 1,
            1 if self.negated else 0,
        )

    def covers(self, other: 'Glob') -> bool:
        """
        Whether every key path matched by `other` is also matched by this
        glob. Negation is ignored; only the paths are compared.
        """
        if self.depth > other.depth:
            return False
        for mine, theirs in zip(self.segments, other.segments):
            if mine == theirs or mine == '*':
                continue
            if _has_magic(theirs) or not fnmatch.fnmatchcase(theirs, mine):
                return False
        return True

    def overlaps(self, other: 'Glob') -> bool:
        return self.covers(other) or other.covers(self)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Glob) and self.glob == other.glob

    def __hash__(self) -> int:
        return hash(self.glob)

    def __repr__(self) -> str:
        return f"Glob({self.glob!r})"


def _parse(globs: Optional[Iterable[str]]) -> List[Glob]:
    if globs is None:
        return []
    if isinstance(globs, str):
        globs = [globs]
    return [Glob(g) for g in globs if isinstance(g, str) and g.strip() != '']


def sort_globs(globs: Iterable[str]) -> List[str]:
    """Sort globs in the order they are applied by filter_data."""
    return [g.glob for g in sorted(_parse(globs), key=lambda g: g.sort_key)]


def _keeps_negation(other: List[Glob], negation: Glob) -> bool:
    """
    Whether a negation still applies once unioned with the `other` list,
    i.e. `other` does not grant the negated path either. When `other`
    only negates a deeper part of it, that deeper negation is the one
    that survives.
    """
    if not any(g.covers(negation) for g in other if not g.negated):
        return True
    return any(g.covers(negation) for g in other if g.negated)


def _shadowed(negation: Glob, positives: List[Glob], negations: List[Glob]) -> bool:
    """Whether a broader negation already removes everything `negation` does."""
    for broader in negations:
        if broader is negation or not broader.covers(negation):
            continue
        # a positive in between restores part of the broader negation
        if not any(broader.covers(p) and p.covers(negation) for p in positives):
            return True
    return False


def normalize(globs: Iterable[str]) -> List[str]:
    """
    Remove duplicate and redundant globs, keeping first-seen order.

    A glob and its negation cancel to the negation. A positive glob already
    covered by another positive glob (with no negation overlapping it) is
    dropped, as is a negation no positive glob covers or one a broader
    negation already applies to.
    """
    parsed: List[Glob] = []
    for g in _parse(globs):
        if g not in parsed:
            parsed.append(g)

    negated_paths = {g.path for g in parsed if g.negated}
    parsed = [g for g in parsed if g.negated or g.path not in negated_paths]

    positives = [g for g in parsed if not g.negated]
    negations = [g for g in parsed if g.negated]
    result = []
    for g in parsed:
        if g.negated:
            if any(p.covers(g) for p in positives) and not _shadowed(g, positives, negations):
                result.append(g)
            continue
        redundant = any(p is not g and p.covers(g) for p in positives)
        if redundant and not any(n.overlaps(g) for n in negations):
            continue
        result.append(g)
    return [g.glob for g in result]


def union(globs_a: Iterable[str], globs_b: Iterable[str]) -> List[str]:
    """
    Union two glob lists into one that grants everything either list grants.

    A negation from one list is kept only if the other list does not grant
    that path itself. Of two overlapping negations the deeper one is kept:
    union(["*", "!a.b"], ["*", "!a"]) == ["*", "!a.b"].
    """
    a = _parse(globs_a)
    b = _parse(globs_b)
    merged = [g for g in a if not g.negated or _keeps_negation(b, g)]
    merged += [g for g in b if not g.negated or _keeps_negation(a, g)]
    return normalize(g.glob for g in merged)


def _copy_matching(source: Mapping, dest: dict, segments: Tuple[str, ...]) -> None:
    head, rest = segments[0], segments[1:]
    for key, value in source.items():
        if not fnmatch.fnmatchcase(str(key), head):
            continue
        if not rest:
            dest[key] = copy.deepcopy(value)
        elif isinstance(value, Mapping):
            existing = dest.get(key)
            child = existing if isinstance(existing, dict) else {}
            _copy_matching(value, child, rest)
            if child and existing is not child:
                dest[key] = child


def _remove_matching(dest: dict, segments: Tuple[str, ...]) -> None:
    head, rest = segments[0], segments[1:]
    for key in list(dest.keys()):
        if not fnmatch.fnmatchcase(str(key), head):
            continue
        if not rest:
            del dest[key]
        elif isinstance(dest[key], dict):
            _remove_matching(dest[key], rest)


def filter_data(data: Any, globs: Optional[Iterable[str]]) -> dict:
    """
    Deep copy a mapping keeping only the keys matched by the given globs.
    An empty glob list yields an empty dict.
    """
    parsed = _parse(globs)
    if not parsed:
        return {}
    if not isinstance(data, Mapping):
        raise AccessControlError(
            f"Expected a mapping to filter, got {type(data).__name__}", INVALID_SHAPE
        )

    result: dict = {}
    for glob in sorted(parsed, key=lambda g: g.sort_key):
        if glob.negated:
            _remove_matching(result, glob.segments)
        else:
            _copy_matching(data, result, glob.segments)
    return result


def filter_all(data: Any, globs: Optional[Iterable[str]]) -> Any:
    """filter_data for a single mapping, or for each item of a list."""
    if isinstance(data, (list, tuple)):
        return [filter_data(item, globs) for item in data]
    return filter_data(data, globs)
