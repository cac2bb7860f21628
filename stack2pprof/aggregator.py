from dataclasses import dataclass

import stack2pprof.chrome as chrome
from stack2pprof.interning import InterningTables

PROCESS_NAME_LABEL = "process_name"
PROCESS_TYPE_LABEL = "process_type"
PROCESS_ID_LABEL = "process_id"
THREAD_ID_LABEL = "thread_id"


@dataclass(frozen=True, order=True)
class Label:
    """A sample label; `key` and `str` are string table ids."""

    key: int
    str: int = 0
    num: int = 0


@dataclass
class AggregatedSample:
    """All the raw samples sharing a stack and a label set."""

    location_ids: tuple[int, ...]
    labels: tuple[Label, ...]
    count: int = 0


class StackAggregator:
    """Folds raw stacks into weighted samples."""

    def __init__(
        self,
        tables: InterningTables,
        include_inlined_functions=False,
        include_process_ids=False,
        include_process_and_thread_ids=False,
        include_process_name=True,
        split_chrome_processes=True,
    ):
        self._tables = tables
        self._include_inlined_functions = include_inlined_functions
        self._include_process_ids = include_process_ids or include_process_and_thread_ids
        self._include_thread_ids = include_process_and_thread_ids
        self._include_process_name = include_process_name
        self._split_chrome_processes = split_chrome_processes
        self._samples = {}  # (location ids, sorted labels) -> AggregatedSample

    @property
    def samples(self):
        """The aggregated samples, in order of first occurrence."""
        return list(self._samples.values())

    def add(self, pid, tid, process_name, frames, command_line=""):
        """Adds one raw sample and returns the sample it was folded into."""
        location_ids = tuple(
            self._tables.location(frame, self._include_inlined_functions)
            for frame in frames
        )
        labels = self.labels(pid, tid, process_name, command_line)
        key = (location_ids, tuple(sorted(labels)))
        sample = self._samples.get(key)
        if sample is None:
            sample = AggregatedSample(location_ids, labels)
            self._samples[key] = sample
        sample.count += 1
        return sample

    def labels(self, pid, tid, process_name, command_line=""):
        """Returns the labels attached to a sample of the given process/thread."""
        strings = self._tables.strings
        labels = []
        name = process_name or ""
        if self._split_chrome_processes and chrome.is_chrome_process(name):
            process_type = chrome.chrome_process_type(command_line)
            labels.append(
                Label(
                    strings.intern(PROCESS_TYPE_LABEL),
                    str=strings.intern(process_type),
                )
            )
            name = chrome.split_process_name(name, command_line)
        if self._include_process_name:
            labels.append(
                Label(strings.intern(PROCESS_NAME_LABEL), str=strings.intern(name))
            )
        if self._include_process_ids:
            labels.append(Label(strings.intern(PROCESS_ID_LABEL), num=pid or 0))
        if self._include_thread_ids and tid is not None:
            labels.append(Label(strings.intern(THREAD_ID_LABEL), num=tid))
        return tuple(labels)
