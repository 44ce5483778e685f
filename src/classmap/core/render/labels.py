"""Class node labels.

Each class vertex is labelled with a small two-column grid: a caption
column (``Class`` / ``Methods``) and a content column holding the class
name and its methods.  Abstract class names and abstract methods are
italicized.  The caption column can be switched off, leaving a plain UML
style box.
"""

from __future__ import annotations

import html
from dataclasses import dataclass

from classmap.core.graph.model import ClassSymbol

CLASS_CAPTION = "Class"
METHODS_CAPTION = "Methods"

_CAPTION_COLOR = "#6C757D"

@dataclass(frozen=True)
class TextSpan:
    """One styled line of label text."""

    text: str
    italic: bool = False

    def to_html(self) -> str:
        escaped = html.escape(self.text)
        return f"<I>{escaped}</I>" if self.italic else escaped

@dataclass(frozen=True)
class LabelRow:
    caption: str
    spans: tuple[TextSpan, ...]

@dataclass(frozen=True)
class ClassLabel:
    """Label content for one class vertex.

    ``rows`` always starts with the class-name row.  A method row follows
    only when the class has methods, and only then is a divider drawn.
    """

    rows: tuple[LabelRow, ...]
    show_captions: bool = True

    @property
    def name(self) -> TextSpan:
        return self.rows[0].spans[0]

    @property
    def methods(self) -> tuple[TextSpan, ...]:
        return self.rows[1].spans if len(self.rows) > 1 else ()

    @property
    def has_divider(self) -> bool:
        return len(self.rows) > 1

    @property
    def captions(self) -> tuple[str, ...]:
        """Captions shown in the first column (empty when it is hidden)."""
        if not self.show_captions:
            return ()
        return tuple(row.caption for row in self.rows)

    @property
    def column_count(self) -> int:
        return 2 if self.show_captions else 1

    def to_html(self) -> str:
        """Render as a Graphviz HTML-like ``<TABLE>`` (without the outer ``<>``)."""
        parts = ['<TABLE BORDER="0" CELLBORDER="0" CELLSPACING="0" CELLPADDING="4">']
        for i, row in enumerate(self.rows):
            if i > 0:
                parts.append("<HR/>")
            parts.append("<TR>")
            if self.show_captions:
                parts.append(
                    f'<TD ALIGN="LEFT" VALIGN="TOP"><FONT COLOR="{_CAPTION_COLOR}">'
                    f"{html.escape(row.caption)}</FONT></TD>"
                )
            cell = "<BR/>".join(span.to_html() for span in row.spans)
            align = ' ALIGN="LEFT" BALIGN="LEFT"' if i > 0 else ""
            parts.append(f"<TD{align}>{cell}</TD>")
            parts.append("</TR>")
        parts.append("</TABLE>")
        return "".join(parts)

def render_class_label(
    symbol: ClassSymbol,
    show_explanatory_column: bool = True,
) -> ClassLabel:
    """Build the label for *symbol*.

    Methods are listed abstract first (italic), then regular (plain).
    *show_explanatory_column* only toggles the caption column.
    """
    rows = [LabelRow(CLASS_CAPTION, (TextSpan(symbol.name, italic=symbol.is_abstract),))]

    methods = tuple(TextSpan(name, italic=True) for name in symbol.abstract_methods) + tuple(
        TextSpan(name) for name in symbol.regular_methods
    )
    if methods:
        rows.append(LabelRow(METHODS_CAPTION, methods))

    return ClassLabel(rows=tuple(rows), show_captions=show_explanatory_column)
