import math
from dataclasses import dataclass

WILDCARD = "*"


def _split(filter_string):
    return [item.strip() for item in filter_string.strip().split(",") if item.strip()]


def parse_process_filter(filter_string):
    """Parses a comma-separated list of process names.

    Returns None (no filtering) for the `*` wildcard or an empty string.
    """
    if filter_string is None or filter_string.strip() == WILDCARD:
        return None
    names = _split(filter_string)
    return frozenset(names) if names else None


def parse_process_id_filter(filter_string):
    """Parses a comma-separated list of process ids.

    Returns None (no filtering) for the `*` wildcard or an empty string and
    raises ValueError for entries that are not integers.
    """
    if filter_string is None or filter_string.strip() == WILDCARD:
        return None
    pids = set()
    for item in _split(filter_string):
        try:
            pids.add(int(item, 0))
        except ValueError:
            raise ValueError(f"Invalid process id in filter: {item!r}") from None
    return frozenset(pids) if pids else None


@dataclass(frozen=True)
class FilterPolicy:
    """Decides which samples make it into the profile."""

    process_names: frozenset[str] | None = None
    process_ids: frozenset[int] | None = None
    time_start: float = 0
    time_end: float = math.inf

    def should_include(self, pid, process_name, timestamp):
        if not self.time_start <= timestamp <= self.time_end:
            return False
        if self.process_names is not None and process_name not in self.process_names:
            return False
        if self.process_ids is not None and pid not in self.process_ids:
            return False
        return True
