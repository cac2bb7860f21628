import re
from dataclasses import dataclass

import stack2pprof.dto as dto


@dataclass(frozen=True)
class Function:
    """An interned function; names are string table ids."""

    id: int
    name: int
    system_name: int
    filename: int


@dataclass(frozen=True)
class Line:
    """One (function, line) entry of a location."""

    function_id: int
    line: int


@dataclass(frozen=True)
class Location:
    """An interned location; `lines` are ordered innermost last."""

    id: int
    mapping_id: int
    address: int
    lines: tuple[Line, ...]


@dataclass(frozen=True)
class Mapping:
    """An interned module mapping."""

    id: int
    memory_start: int
    memory_limit: int
    file_offset: int
    filename: int


class StringTable:
    """Deduplicated strings; id 0 is always the empty string."""

    def __init__(self):
        self._strings = [""]
        self._ids = {"": 0}

    def intern(self, text):
        """Returns the id of `text`, adding it to the table if needed."""
        if text is None:
            return 0
        string_id = self._ids.get(text)
        if string_id is None:
            string_id = len(self._strings)
            self._ids[text] = string_id
            self._strings.append(text)
        return string_id

    def __getitem__(self, string_id):
        return self._strings[string_id]

    def __iter__(self):
        return iter(self._strings)

    def __len__(self):
        return len(self._strings)


class _Table:
    """Insertion-ordered entries keyed by content; ids start at 1."""

    def __init__(self):
        self._entries = []
        self._ids = {}

    def _intern(self, key, make_entry):
        entry_id = self._ids.get(key)
        if entry_id is None:
            entry_id = len(self._entries) + 1
            self._entries.append(make_entry(entry_id))
            self._ids[key] = entry_id
        return entry_id

    def __getitem__(self, entry_id):
        return self._entries[entry_id - 1]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)


class FunctionTable(_Table):
    def intern(self, name, system_name, filename):
        """Returns the id of the function with the given string ids."""
        key = (name, system_name, filename)
        return self._intern(key, lambda i: Function(i, name, system_name, filename))


class MappingTable(_Table):
    def intern(self, filename, base, size, offset):
        """Returns the id of the mapping for `filename`.

        Mappings are keyed by path only; the first base/size/offset seen for a
        path is the one recorded.
        """
        return self._intern(
            filename, lambda i: Mapping(i, base, base + size, offset, filename)
        )


class LocationTable(_Table):
    def intern(self, mapping_id, address, lines):
        """Returns the id of the location for the given inline chain.

        Locations with symbols are keyed by (mapping, lines); address-only
        locations also need the address to stay distinct.
        """
        lines = tuple(lines)
        key = (mapping_id, lines) if lines else (mapping_id, address)
        return self._intern(key, lambda i: Location(i, mapping_id, address, lines))


class InterningTables:
    """Owns all the tables of one profile and resolves frames into them."""

    def __init__(self, strip_source_file_name_prefix=None):
        self.strings = StringTable()
        self.functions = FunctionTable()
        self.locations = LocationTable()
        self.mappings = MappingTable()
        self._strip_prefix = (
            re.compile(strip_source_file_name_prefix)
            if strip_source_file_name_prefix
            else None
        )
        self._file_ids = {}  # raw path -> string id

    def file_name(self, path):
        """Returns the string id of a source file, stripping the prefix first."""
        if not path:
            return 0
        file_id = self._file_ids.get(path)
        if file_id is None:
            stripped = path
            if self._strip_prefix:
                stripped = self._strip_prefix.sub("", path, count=1)
            file_id = self.strings.intern(stripped)
            self._file_ids[path] = file_id
        return file_id

    def function(self, name, file_name):
        """Returns the id of a function, or 0 when it has no name."""
        if not name:
            return 0
        name_id = self.strings.intern(name)
        return self.functions.intern(name_id, name_id, self.file_name(file_name))

    def mapping(self, image: dto.Image | None):
        """Returns the id of the mapping for `image`, or 0 when absent."""
        if image is None or not image.path:
            return 0
        return self.mappings.intern(
            self.strings.intern(image.path),
            image.base or 0,
            image.size or 0,
            image.offset or 0,
        )

    def location(self, frame: dto.Frame, include_inlined=False):
        """Returns the location id of `frame`."""
        lines = []
        function_id = self.function(frame.function_name, frame.file_name)
        if function_id:
            lines.append(Line(function_id, frame.line_number or 0))
            if include_inlined:
                for inline in frame.inlined:
                    inline_id = self.function(inline.function_name, inline.file_name)
                    if inline_id:
                        lines.append(Line(inline_id, inline.line_number or 0))
        return self.locations.intern(
            self.mapping(frame.image), frame.address or 0, lines
        )
