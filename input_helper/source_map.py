from bisect import bisect_right
from collections import namedtuple
from source_location.errors import DecodeFailed

# start/length/file are byte based, file is the source id (or -1 when the compiler has no source)
SourceLocation = namedtuple("SourceLocation", ["start", "length", "file", "jump", "modifier_depth"])

FIELDS = len(SourceLocation._fields)


class Source:
    def __init__(self, filename):
        self.filename = filename
        self.content = self._load_content()
        self.line_break_positions = get_line_break_positions(self.content)

    def _load_content(self):
        # source map offsets count bytes, not characters
        with open(self.filename, 'rb') as f:
            content = f.read()
        return content

    def get_content_with_location(self, location):
        if location.start is None or location.length is None:
            return ""
        return self.content[location.start:location.start + location.length].decode("utf-8", errors="replace")


class SourceMappingDecoder:
    """Decoder for the compressed source maps emitted by solc (`s:l:f:j:m;...`)."""

    def at_index(self, index, mapping):
        """
        Return the location of the instruction at `index`.

        Empty entries and empty fields repeat the value of the closest previous entry
        defining them; a start or length of -1 is treated like an empty field.
        """
        entries = self._split(mapping)
        if index < 0 or index >= len(entries):
            raise DecodeFailed(f"instruction index {index} is out of range for a source map of {len(entries)} entries")

        values = [None] * FIELDS
        for k in range(index, -1, -1):
            if not entries[k]:
                continue
            self._inherit(values, entries[k], k)
            if all(value is not None for value in values):
                break
        return SourceLocation(*values)

    def decode(self, mapping):
        """Decompress the whole source map, one location per instruction."""
        entries = self._split(mapping)
        locations = []
        last = [None] * FIELDS
        for k, entry in enumerate(entries):
            if entry:
                current = [None] * FIELDS
                self._inherit(current, entry, k)
                last = [value if value is not None else previous for value, previous in zip(current, last)]
            locations.append(SourceLocation(*last))
        return locations

    def _split(self, mapping):
        if not isinstance(mapping, str):
            raise DecodeFailed(f"source map must be a string, got {type(mapping).__name__}")
        return mapping.split(";")

    def _inherit(self, values, entry, k):
        fields = entry.split(":")
        if len(fields) > FIELDS:
            raise DecodeFailed(f"source map entry {k} has too many fields: '{entry}'")
        fields += [""] * (FIELDS - len(fields))
        for i, field in enumerate(fields):
            if values[i] is not None or field == "":
                continue
            if i == 3:
                values[i] = field
                continue
            if i < 2 and field == "-1":
                continue
            try:
                values[i] = int(field)
            except ValueError:
                raise DecodeFailed(f"invalid value '{field}' in source map entry {k}")


def get_line_break_positions(content):
    newline = b"\n" if isinstance(content, bytes) else "\n"
    return [i for i in range(len(content)) if content[i:i + 1] == newline]


def convert_from_char_position(pos, line_breaks):
    lower = bisect_right(line_breaks, pos) - 1
    line = lower if lower >= 0 and line_breaks[lower] == pos else lower + 1
    begin_column = 0 if line == 0 else line_breaks[line - 1] + 1
    return {"line": line, "column": pos - begin_column}


def convert_offset_to_line_column(location, line_breaks):
    # lines and columns are 0 based
    if location.start is not None and location.length is not None and location.start >= 0 and location.length >= 0:
        return {
            "start": convert_from_char_position(location.start, line_breaks),
            "end": convert_from_char_position(location.start + location.length, line_breaks)
        }
    return {"start": None, "end": None}
