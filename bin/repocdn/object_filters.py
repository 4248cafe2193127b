"""Selection of repository objects to invalidate.

Each stage takes an ordered sequence of `/`-prefixed object paths and returns a
new tuple holding the survivors in their original order. `apply_filters` chains
the stages as version exclusion, then regex, then substring.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from repocdn.repo_config import InvalidArgument

_DIGIT = re.compile(r"[0-9]")


def is_versioned(key: str) -> bool:
    """True if the file name (the last `/` segment) contains a digit.

    This also catches names like `mirrorlist2.txt` which aren't really
    versioned; those are left for an explicit --invalidate-versioned run.
    """
    return _DIGIT.search(key.split("/")[-1]) is not None


@dataclass(frozen=True)
class FilterCriteria:
    exclude_versioned: bool = True
    regex: Optional[re.Pattern[str]] = None
    substring: Optional[str] = None

    @classmethod
    def from_options(
        cls, invalidate_versioned: bool = False, pattern_regex: str = "", pattern_substring: str = ""
    ) -> FilterCriteria:
        regex = None
        if pattern_regex:
            try:
                regex = re.compile(pattern_regex)
            except re.error as e:
                raise InvalidArgument(f"Invalid regex '{pattern_regex}': {e}") from e
        return cls(
            exclude_versioned=not invalidate_versioned,
            regex=regex,
            substring=pattern_substring or None,
        )


def drop_versioned(paths: Iterable[str]) -> tuple[str, ...]:
    return tuple(path for path in paths if not is_versioned(path))


def match_regex(paths: Iterable[str], regex: re.Pattern[str]) -> tuple[str, ...]:
    return tuple(path for path in paths if regex.search(path))


def match_substring(paths: Iterable[str], substring: str) -> tuple[str, ...]:
    return tuple(path for path in paths if substring in path)


def apply_filters(paths: Iterable[str], criteria: FilterCriteria) -> tuple[str, ...]:
    selected = tuple(paths)
    if criteria.exclude_versioned:
        selected = drop_versioned(selected)
    if criteria.regex is not None:
        selected = match_regex(selected, criteria.regex)
    if criteria.substring:
        selected = match_substring(selected, criteria.substring)
    return selected


def as_invalidation_paths(keys: Iterable[str]) -> tuple[str, ...]:
    return tuple(f"/{key}" for key in keys)
