from repo_track.text.lines import split_lines_with_eol, strip_eol, is_line_terminator, column_of
from repo_track.text.position import Position, Range

__all__ = [
    "split_lines_with_eol",
    "strip_eol",
    "is_line_terminator",
    "column_of",
    "Position",
    "Range",
]
