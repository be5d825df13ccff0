"""
consolekit rendering styles.

Scope
- Alignment: horizontal alignment of a cell inside its column.
- BorderStyle: the fifteen characters used to draw grid and table borders.
- GridStyle / TableStyle: cell formats, alignments, padding and border style.
- STYLES / THEME: the named styles used in help markup ([h], [em], [tt], ...).

Notes
- Presets are immutable module-level values built once at import
  (BorderStyle.NONE, GridStyle.SOLID_BORDER, TableStyle.ASCII_BORDER, ...).
  Customize them with _replace(), which returns a new style:
      >>> TableStyle.ASCII_BORDER._replace(column_alignments=(Alignment.RIGHT,))
- Cell formats are %-formats with exactly one "%s" for the padded cell.
- get_theme() merges a `__styles__` mapping found in __main__ over STYLES, so a
  host program can recolor help output without touching the library.
"""
import enum
from types import MappingProxyType
from typing import NamedTuple

from rich.theme import Theme


class Alignment(enum.Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"

    def pad(self, length, /):
        """
        Split `length` padding characters into (left, right) counts.
        """
        match self:
            case Alignment.LEFT:
                return 0, length
            case Alignment.RIGHT:
                return length, 0
            case Alignment.CENTER:
                return length // 2, length - length // 2


class BorderStyle(NamedTuple):
    """
    Border characters.

    line_*: horizontal top/center/bottom (ht, hc, hb) and vertical
    left/center/right (vl, vc, vr) lines; corner_*: the four corners;
    crossing_*: center, left, right, top and bottom crossings.
    """
    line_ht: str = ""
    line_hc: str = ""
    line_hb: str = ""
    line_vl: str = ""
    line_vc: str = ""
    line_vr: str = ""
    corner_tl: str = ""
    corner_tr: str = ""
    corner_bl: str = ""
    corner_br: str = ""
    crossing_c: str = ""
    crossing_l: str = ""
    crossing_r: str = ""
    crossing_t: str = ""
    crossing_b: str = ""
    style: str | None = None


BorderStyle.NONE = BorderStyle(line_vc=" ")

BorderStyle.ASCII = BorderStyle(
    *"---|||+++++++++",
)

BorderStyle.SOLID = BorderStyle(
    *"───│││┌┐└┘┼├┤┬┴",
)


class GridStyle(NamedTuple):
    """
    Style of a Grid: one cell format and one alignment for every cell.
    """
    border_style: BorderStyle = BorderStyle.NONE
    cell_format: str = "%s"
    cell_alignment: Alignment = Alignment.LEFT
    padding_char: str = " "
    cell_style: str | None = None


GridStyle.BORDERLESS = GridStyle()
GridStyle.ASCII_BORDER = GridStyle(BorderStyle.ASCII, " %s ")
GridStyle.SOLID_BORDER = GridStyle(BorderStyle.SOLID, " %s ")


class TableStyle(NamedTuple):
    """
    Style of a Table: separate header and body formats and per-column alignments.

    Columns without an entry in column_alignments use default_column_alignment.
    """
    border_style: BorderStyle = BorderStyle.NONE
    header_cell_format: str = "%s"
    cell_format: str = "%s"
    column_alignments: tuple = ()
    default_column_alignment: Alignment = Alignment.LEFT
    padding_char: str = " "
    header_cell_style: str | None = None
    cell_style: str | None = None

    def get_column_alignment(self, column, /):
        if 0 <= column < len(self.column_alignments):
            return self.column_alignments[column]
        return self.default_column_alignment

    def get_column_alignments(self, columns, /):
        return [self.get_column_alignment(column) for column in range(columns)]


TableStyle.BORDERLESS = TableStyle(BorderStyle.NONE._replace(line_hc="=", line_vc=" ", crossing_c=" "))
TableStyle.ASCII_BORDER = TableStyle(BorderStyle.ASCII, " %s ", " %s ")
TableStyle.SOLID_BORDER = TableStyle(BorderStyle.SOLID, " %s ", " %s ")


STYLES = MappingProxyType({
    "h": "bold #E6E6F0",  # section headers
    "b": "bold",
    "u": "underline",
    "em": "#00E5FF",  # names of arguments, options and commands
    "c1": "#FF4DA6",
    "c2": "#9CE19C",
    "tt": "bold #00E5FF",  # literal program and command names
    "error": "bold #FF4DA6",
    "warn": "bold #FFD166",
    "hint": "italic #9CE19C",
})

THEME = Theme(STYLES)


def get_theme():
    """
    Return THEME, or a theme with the overrides of __main__.__styles__ applied.
    """
    if overrides := getattr(__import__("__main__"), "__styles__", {}):
        return Theme({**STYLES, **overrides})
    return THEME


__all__ = (
    "Alignment",
    "BorderStyle",
    "GridStyle",
    "TableStyle",
    "STYLES",
    "THEME",
    "get_theme",
)
