"""
consolekit layout engine.

Overview
- Every element renders to an Output with render(output, indentation=0) and
  lays its text out within output.width. Written lines are right-trimmed.
- Texts are rich markup strings (or rich Text objects). Widths are measured on
  the visible text only, so markup never takes room, and wrapping splits rich
  Text objects, so styles survive across wrapped lines.

Elements
- Paragraph(text): word-wrapped text.
- EmptyLine(): a line break (indentation is ignored).
- LabeledParagraph(label, text, padding=2, aligned=True): a label followed by
  word-wrapped text; continuation lines are indented under the text column.
- LabelAlignment: one text column shared by the aligned labeled paragraphs of
  a layout (the widest label plus its padding wins).
- BlockLayout: a sequence of elements; begin_block()/end_block() shift the
  indentation of the following elements by two columns.
- Grid(style): cells laid out row-major into as many columns as fit.
- Table(style): a header row and rows of a fixed number of cells.

Column fitting (CellWrapper.fit)
1. Cells are placed row-major into N columns; a column is as wide as its
   widest cell. If the total fits the maximum width, nothing is wrapped.
2. "Short" columns (not wider than the available width divided by the number
   of remaining columns) keep their width; the check repeats on what is left
   until no column is short.
3. Each remaining "long" column gets a share of the available width in
   proportion to its length; the last one absorbs the rounding remainder.
   Its cells are word-wrapped and the column is re-measured before the next
   share is computed.
"""
import math
import re

from rich.cells import cell_len
from rich.text import Text

from .faults import FaultCode, RenderError, ValidationError
from .logs import get_logger
from .styles import *

logger = get_logger(__name__)


def _text(text, /):
    if isinstance(text, Text):
        return text.copy()
    if text is None:
        return Text("")
    if not isinstance(text, str):
        raise TypeError(f"layout texts must be strings or texts, got {type(text).__name__!r}")
    return Text.from_markup(text)


def visible_len(text, /):
    """
    Return the rendered width of a markup string (or Text), widest line first.
    """
    return max((line.cell_len for line in _text(text).split("\n", allow_blank=True)), default=0)


def max_word_len(text, /):
    """
    Return the width of the longest word, words being separated by spaces and line breaks.
    """
    return max(map(cell_len, re.split(r"[ \n]", _text(text).plain)), default=0)


def wordwrap(text, width, /):
    """
    Wrap text into lines of at most `width` cells.

    Lines break at literal spaces only (a non-breaking space never breaks);
    words longer than the width are cut. Existing line breaks are kept.
    Returns a list of rich Text lines, right-trimmed.
    """
    if width < 1:
        raise RenderError(
            "cannot wrap text into %d columns" % width,
            hint="increase the terminal width",
            code=FaultCode.LAYOUT_OVERFLOW,
        )
    lines = []
    for line in _text(text).split("\n", allow_blank=True):
        plain, start = line.plain, 0
        while cell_len(plain[start:]) > width:
            end = _fit(plain, start, width)
            # a space right after the fitting prefix is a break too
            cut = plain.rfind(" ", start, end + 1)
            if cut == start:
                start += 1
                continue
            if cut == -1:
                lines.append(line[start:end])
                start = end
            else:
                lines.append(line[start:cut])
                start = cut + 1
        lines.append(line[start:])
    for line in lines:
        line.rstrip()
    return lines


def _fit(plain, start, width, /):
    # end of the longest prefix of plain[start:] within width cells, one character at least
    end, used = start, 0
    while end < len(plain) and used + cell_len(plain[end]) <= width:
        used += cell_len(plain[end])
        end += 1
    return max(end, start + 1)


def _join(lines, /):
    return Text("\n").join(lines)


def _write_line(output, /, *parts):
    line = Text.assemble(*parts)
    line.rstrip()
    output.write(Text.assemble(line, "\n"))


def _format(format, /):
    """
    Split a cell format ("%s", " %s ") into its prefix and suffix.
    """
    if format.count("%s") != 1:
        raise ValidationError(
            f"cell formats must contain exactly one '%s', got {format!r}",
            code=FaultCode.INVALID_DESCRIPTOR,
        )
    return format.split("%s")


def _excess(format, /):
    return visible_len("".join(_format(format)))


class CellWrapper:
    """
    Distribute cells into columns and wrap them into a maximum total width.

    Cells are right-trimmed when added. After fit(), rows holds the wrapped
    cells (Text objects with line breaks) and column_lengths the width of
    every column.
    """

    def __init__(self, cells=(), /):
        self._cells = []
        self.add_cells(cells)
        self._reset(0, 0)

    def _reset(self, max_total_width, columns):
        self._rows = []
        self._cell_lengths = []
        self._columns = columns
        self._column_lengths = [0] * columns
        self._word_wraps = False
        self._word_cuts = False
        self._max_total_width = max_total_width
        self._total_width = 0

    def add_cell(self, cell, /):
        text = _text(cell)
        text.rstrip()
        self._cells.append(text)
        return self

    def add_cells(self, cells, /):
        for cell in cells:
            self.add_cell(cell)
        return self

    def set_cells(self, cells, /):
        self._cells = []
        return self.add_cells(cells)

    @property
    def cells(self):
        return list(self._cells)

    @property
    def rows(self):
        return [list(row) for row in self._rows]

    @property
    def column_lengths(self):
        return list(self._column_lengths)

    @property
    def columns(self):
        return self._columns

    @property
    def max_total_width(self):
        return self._max_total_width

    @property
    def total_width(self):
        return self._total_width

    def has_word_wraps(self):
        return self._word_wraps

    def has_word_cuts(self):
        return self._word_cuts

    def estimated_columns(self, max_total_width, /):
        """
        Number of leading cells that fit side by side into max_total_width.
        """
        width = 0
        for index, cell in enumerate(self._cells):
            width += visible_len(cell)
            if width > max_total_width:
                return index
        return len(self._cells)

    def fit(self, max_total_width, columns, /):
        if columns < 1:
            raise RenderError(
                "cannot lay cells out into %d columns" % columns,
                code=FaultCode.LAYOUT_OVERFLOW,
            )
        self._reset(max_total_width, columns)
        self._init_rows()
        if self._total_width > max_total_width:
            self._wrap_columns()
        logger.debug(
            "fitted %d cells into %d columns %r (wraps=%s, cuts=%s)",
            len(self._cells), columns, self._column_lengths, self._word_wraps, self._word_cuts,
        )
        return self

    def _init_rows(self):
        for index in range(0, len(self._cells), self._columns):
            row = self._cells[index:index + self._columns]
            row += [Text("")] * (self._columns - len(row))
            lengths = [visible_len(cell) for cell in row]
            self._rows.append(row)
            self._cell_lengths.append(lengths)
            self._column_lengths = list(map(max, self._column_lengths, lengths))
        self._total_width = sum(self._column_lengths)

    def _wrap_columns(self):
        available = self._max_total_width
        long = dict(enumerate(self._column_lengths))

        # short columns keep their length, repeat on the rest until none is short
        while long:
            threshold = available / len(long)
            short = [column for column, length in long.items() if length <= threshold]
            if not short:
                break
            for column in short:
                available -= long.pop(column)

        actual = sum(long.values())
        last = max(long, default=None)
        for column, length in long.items():
            self._column_lengths[column] = math.floor(length / actual * available + 0.5)
            if column == last:
                self._column_lengths[column] += self._max_total_width - sum(self._column_lengths)
            if self._column_lengths[column] < 1:
                raise RenderError(
                    "there is no room left for column %d (%d columns of cells, %d available)" % (
                        column + 1, self._columns, self._max_total_width,
                    ),
                    hint="increase the terminal width or reduce the number of columns",
                    code=FaultCode.LAYOUT_OVERFLOW,
                )
            self._wrap_column(column, self._column_lengths[column])
            self._column_lengths[column] = max(lengths[column] for lengths in self._cell_lengths)
            actual += self._column_lengths[column] - length

        self._total_width = sum(self._column_lengths)

    def _wrap_column(self, column, width):
        for row, lengths in zip(self._rows, self._cell_lengths):
            if lengths[column] <= width:
                continue
            self._word_wraps = True
            if max_word_len(row[column]) > width:
                self._word_cuts = True
            row[column] = _join(wordwrap(row[column], width))
            lengths[column] = visible_len(row[column])


def _draw_border(output, lengths, indentation, line, left, center, right, style):
    text = Text(left, style or "")
    for index, length in enumerate(lengths):
        text.append(line * length, style or "")
        text.append(center if index < len(lengths) - 1 else right, style or "")
    text.rstrip()
    # borders made only of blanks are not drawn
    if text.plain:
        output.write(Text.assemble(" " * indentation, text, "\n"))


def _draw_top_border(output, border, lengths, indentation=0):
    _draw_border(output, lengths, indentation, border.line_ht, border.corner_tl, border.crossing_t, border.corner_tr, border.style)


def _draw_middle_border(output, border, lengths, indentation=0):
    _draw_border(output, lengths, indentation, border.line_hc, border.crossing_l, border.crossing_c, border.crossing_r, border.style)


def _draw_bottom_border(output, border, lengths, indentation=0):
    _draw_border(output, lengths, indentation, border.line_hb, border.corner_bl, border.crossing_b, border.corner_br, border.style)


def _draw_row(output, border, row, lengths, alignments, format, style, padding, indentation=0):
    cells = [cell.split("\n", allow_blank=True) for cell in row]
    prefix, suffix = _format(format)
    for index in range(max(map(len, cells), default=0)):
        line = Text(" " * indentation)
        line.append(border.line_vl, border.style or "")
        for column, lines in enumerate(cells):
            cell = lines[index] if index < len(lines) else Text("")
            left, right = alignments[column].pad(max(lengths[column] - cell.cell_len, 0))
            line.append_text(Text.assemble(prefix, padding * left, cell, padding * right, suffix, style=style or ""))
            line.append(border.line_vc if column < len(cells) - 1 else border.line_vr, border.style or "")
        line.rstrip()
        output.write(Text.assemble(line, "\n"))


class Grid:
    """
    Cells laid out row-major into as many columns as the width allows.

    The number of columns starts at the estimate for the width (capped by
    max_columns) and goes down while words have to be cut and it stays at or
    above min_columns.
    """

    def __init__(self, style=GridStyle.BORDERLESS, /, min_columns=4, max_columns=math.inf):
        if not isinstance(style, GridStyle):
            raise TypeError("grid 'style' must be a grid-style")
        if min_columns < 1 or max_columns < 1:
            raise ValueError("grid column bounds must be at least 1")
        self._style = style
        self._cells = []
        self._min_columns = min(min_columns, max_columns)
        self._max_columns = max_columns

    @property
    def style(self):
        return self._style

    @property
    def cells(self):
        return list(self._cells)

    @property
    def min_columns(self):
        return self._min_columns

    @property
    def max_columns(self):
        return self._max_columns

    def add_cell(self, cell, /):
        self._cells.append(cell)
        return self

    def add_cells(self, cells, /):
        self._cells.extend(cells)
        return self

    def set_cells(self, cells, /):
        self._cells = list(cells)
        return self

    def fit(self, width, /, indentation=0):
        """
        Return the CellWrapper fitted for a screen of the given width.
        """
        border = self._style.border_style
        excess = _excess(self._style.cell_format)
        wrapper = CellWrapper(self._cells)
        columns = max(1, min(self._max_columns, wrapper.estimated_columns(width)))
        while True:
            borders = visible_len(border.line_vl) + (columns - 1) * visible_len(border.line_vc) + visible_len(border.line_vr)
            wrapper.fit(width - indentation - borders - columns * excess, columns)
            columns -= 1
            if not wrapper.has_word_cuts() or columns < max(self._min_columns, 1):
                return wrapper

    def render(self, output, /, indentation=0):
        if not self._cells:
            return
        style = self._style
        wrapper = self.fit(output.width, indentation)
        excess = _excess(style.cell_format)
        lengths = wrapper.column_lengths
        alignments = [style.cell_alignment] * len(lengths)
        border_lengths = [length + excess for length in lengths]

        _draw_top_border(output, style.border_style, border_lengths, indentation)
        rows = wrapper.rows
        for index, row in enumerate(rows):
            _draw_row(output, style.border_style, row, lengths, alignments, style.cell_format, style.cell_style, style.padding_char, indentation)
            if index < len(rows) - 1:
                _draw_middle_border(output, style.border_style, border_lengths, indentation)
        _draw_bottom_border(output, style.border_style, border_lengths, indentation)


class Table:
    """
    A header row and rows with a fixed number of cells.

    The first row given (header or not) fixes the number of columns; rows of
    another length raise ValidationError. Tables never reduce their columns.
    """

    def __init__(self, style=TableStyle.ASCII_BORDER, /):
        if not isinstance(style, TableStyle):
            raise TypeError("table 'style' must be a table-style")
        self._style = style
        self._header_row = []
        self._rows = []
        self._columns = None

    @property
    def style(self):
        return self._style

    @property
    def columns(self):
        return self._columns

    @property
    def header_row(self):
        return list(self._header_row)

    @property
    def rows(self):
        return [list(row) for row in self._rows]

    def _check(self, row, kind="row"):
        row = list(row)
        if self._columns is None:
            self._columns = len(row)
        elif len(row) != self._columns:
            raise ValidationError(
                "expected the %s to contain %d cells, got %d" % (kind, self._columns, len(row)),
                code=FaultCode.INVALID_ROW,
            )
        return row

    def has_header_row(self):
        return bool(self._header_row)

    def set_header_row(self, row, /):
        self._header_row = self._check(row, "header row")
        return self

    def add_row(self, row, /):
        self._rows.append(self._check(row))
        return self

    def add_rows(self, rows, /):
        for row in rows:
            self.add_row(row)
        return self

    def set_rows(self, rows, /):
        self._rows = []
        return self.add_rows(rows)

    def set_row(self, index, row, /):
        self._rows[index] = self._check(row)
        return self

    def is_empty(self):
        return not self._rows and not self._header_row

    def fit(self, width, /, indentation=0):
        style = self._style
        border = style.border_style
        excess = max(_excess(style.header_cell_format), _excess(style.cell_format))
        borders = visible_len(border.line_vl) + (self._columns - 1) * visible_len(border.line_vc) + visible_len(border.line_vr)
        wrapper = CellWrapper([cell for row in [self._header_row, *self._rows] for cell in row])
        return wrapper.fit(width - indentation - borders - self._columns * excess, self._columns)

    def render(self, output, /, indentation=0):
        if self.is_empty():
            return
        style = self._style
        wrapper = self.fit(output.width, indentation)
        excess = max(_excess(style.header_cell_format), _excess(style.cell_format))
        lengths = wrapper.column_lengths
        alignments = style.get_column_alignments(len(lengths))
        border_lengths = [length + excess for length in lengths]

        rows = wrapper.rows
        _draw_top_border(output, style.border_style, border_lengths, indentation)
        if self._header_row:
            _draw_row(output, style.border_style, rows.pop(0), lengths, alignments, style.header_cell_format, style.header_cell_style, style.padding_char, indentation)
            _draw_middle_border(output, style.border_style, border_lengths, indentation)
        for row in rows:
            _draw_row(output, style.border_style, row, lengths, alignments, style.cell_format, style.cell_style, style.padding_char, indentation)
        _draw_bottom_border(output, style.border_style, border_lengths, indentation)


class Paragraph:
    """
    Word-wrapped text, one column short of the width.
    """

    def __init__(self, text, /):
        self._text = text

    @property
    def text(self):
        return self._text

    def render(self, output, /, indentation=0):
        prefix = " " * indentation
        text = _text(self._text)
        text.rstrip()
        for line in wordwrap(text, output.width - 1 - indentation):
            _write_line(output, prefix, line)


class EmptyLine:
    """
    A line break; indentation is ignored.
    """

    def render(self, output, /, indentation=0):
        output.write("\n")


class LabeledParagraph:
    """
    A label followed by word-wrapped text.

    The text starts at the offset of the shared LabelAlignment when the
    paragraph is aligned, but never closer than `padding` columns after the label.
    """

    def __init__(self, label, text, /, padding=2, aligned=True):
        self._label = label
        self._text = text
        self._padding = padding
        self._aligned = bool(aligned)
        self._alignment = None

    @property
    def label(self):
        return self._label

    @property
    def text(self):
        return self._text

    @property
    def padding(self):
        return self._padding

    @property
    def alignment(self):
        return self._alignment

    def is_aligned(self):
        return self._aligned

    def set_alignment(self, alignment, /):
        if not isinstance(alignment, LabelAlignment):
            raise TypeError("set_alignment() argument must be a label-alignment")
        self._alignment = alignment
        return self

    def render(self, output, /, indentation=0):
        prefix = " " * indentation
        label = _text(self._label)
        offset = self._alignment.text_offset - indentation if self._aligned and self._alignment is not None else 0
        offset = max(offset, label.cell_len + self._padding)

        text = _text(self._text)
        text.rstrip()
        lines = wordwrap(text, output.width - 1 - offset - indentation) if text.plain else [Text("")]
        _write_line(output, prefix, label, " " * (offset - label.cell_len), lines[0])
        for line in lines[1:]:
            _write_line(output, prefix, " " * offset, line)


class LabelAlignment:
    """
    Text column shared by labeled paragraphs.
    """

    def __init__(self):
        self._paragraphs = []
        self._text_offset = 0

    @property
    def text_offset(self):
        return self._text_offset

    def set_text_offset(self, text_offset, /):
        self._text_offset = text_offset
        return self

    def add(self, paragraph, /, indentation=0):
        """
        Register a paragraph rendered at the given indentation (unaligned ones are ignored).
        """
        if paragraph.is_aligned():
            self._paragraphs.append((paragraph, indentation))
        return self

    def align(self, indentation=0):
        self._text_offset = max(
            (indent + visible_len(paragraph.label) + paragraph.padding for paragraph, indent in self._paragraphs),
            default=0,
        ) + indentation
        return self


class BlockLayout:
    """
    Elements rendered one after the other, with block indentation.
    """

    def __init__(self):
        self._elements = []
        self._indentation = 0
        self._alignment = LabelAlignment()

    @property
    def alignment(self):
        return self._alignment

    def add(self, element, /):
        self._elements.append((element, self._indentation))
        if isinstance(element, LabeledParagraph):
            self._alignment.add(element, self._indentation)
            element.set_alignment(self._alignment)
        return self

    def begin_block(self):
        self._indentation += 2
        return self

    def end_block(self):
        if self._indentation < 2:
            raise ValidationError("end_block() called without a matching begin_block()", code=FaultCode.INVALID_DESCRIPTOR)
        self._indentation -= 2
        return self

    def render(self, output, /, indentation=0):
        self._alignment.align(indentation)
        for element, indent in self._elements:
            element.render(output, indent + indentation)


__all__ = (
    "visible_len",
    "max_word_len",
    "wordwrap",
    "CellWrapper",
    "Grid",
    "Table",
    "Paragraph",
    "EmptyLine",
    "LabeledParagraph",
    "LabelAlignment",
    "BlockLayout",
)
