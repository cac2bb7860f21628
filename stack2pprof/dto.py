from dataclasses import dataclass, field


@dataclass
class Image:
    """Describes a module loaded in a process."""

    path: str
    base: int = 0
    size: int = 0
    offset: int = 0


@dataclass
class InlineFrame:
    """Describes a function inlined at a frame's address."""

    function_name: str | None = None
    file_name: str | None = None
    line_number: int | None = None


@dataclass
class Frame:
    """Describes one frame of a sampled stack.

    The function, file and line describe the outermost function at the
    address; `inlined` lists the functions inlined into it, innermost last.
    """

    address: int = 0
    image: Image | None = None
    function_name: str | None = None
    file_name: str | None = None
    line_number: int | None = None
    inlined: list[InlineFrame] = field(default_factory=list)


@dataclass
class Process:
    """Describes a sampled process."""

    pid: int
    name: str
    command_line: str = ""


@dataclass
class Sample:
    """Describes a CPU sample; frames are ordered leaf first."""

    process: Process
    tid: int | None
    timestamp: float
    frames: list[Frame] = field(default_factory=list)
