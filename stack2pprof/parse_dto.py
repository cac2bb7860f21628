from dataclasses import dataclass


@dataclass
class Image:
    """Describes a module image loaded at a base address."""

    path: str
    base: int
    size: int
    offset: int = 0


@dataclass
class Process:
    """Describes a process and its command line."""

    pid: int
    name: str
    command_line: str = ""


@dataclass
class SampleStart:
    """Describes the start of a CPU sample; frames follow."""

    pid: int
    tid: int | None
    timestamp: float


@dataclass
class Frame:
    """Describes a stack frame of the current sample."""

    address: int
    image_path: str | None
    function_name: str | None
    file_name: str | None
    line_number: int | None


@dataclass
class Inline:
    """Describes a function inlined in the current frame."""

    function_name: str | None
    file_name: str | None
    line_number: int | None
