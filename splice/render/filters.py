"""Typed FFmpeg filter expressions.

Every filter string this package emits is built here: a filter is a name
plus an ordered list of key/value arguments, and rendering is the only
place where numbers are formatted and text is quoted and escaped. Callers
never concatenate filter strings by hand, so escaping is applied exactly
once.

Usage:
    FilterExpr("eq").arg("brightness", 0.2).arg("contrast", 1.1).render()
    # -> "eq=brightness=0.2:contrast=1.1"

    FilterExpr("drawtext").arg("text", Text("It's 5:00")).render()
    # -> "drawtext=text='It'\\''s 5\\:00'"
"""

import re
from dataclasses import dataclass
from typing import Union


class Text(str):
    """Literal user text: escaped for drawtext and single-quoted."""


class Expr(str):
    """FFmpeg expression: single-quoted so its commas stay inside the argument."""


FilterValue = Union[int, float, str, Text, Expr]


def escape_drawtext_text(text: str) -> str:
    """Escape literal text for a single-quoted drawtext argument.

    Backslashes are escaped first so the escapes added afterwards are not
    doubled. Single quotes close the quoted run, emit an escaped quote and
    reopen it. Colons (the argument separator) and percent signs (drawtext
    expansion) are backslash-escaped.
    """
    return (
        text.replace("\\", "\\\\")
        .replace("'", "'\\''")
        .replace(":", "\\:")
        .replace("%", "\\%")
    )


def format_number(value: float) -> str:
    """Format a number the way filter arguments expect it (no trailing ``.0``)."""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    value = round(value, 6)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_value(value: FilterValue) -> str:
    if isinstance(value, Text):
        return f"'{escape_drawtext_text(value)}'"
    if isinstance(value, Expr):
        return f"'{value}'"
    if isinstance(value, (int, float)):
        return format_number(value)
    return value


_HEX_SHORT = re.compile(r"^#([0-9a-fA-F]{3})$")
_HEX_LONG = re.compile(r"^#([0-9a-fA-F]{6})$")
_RGB = re.compile(r"^rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([\d.]+)\s*)?\)$")


def css_color_to_ffmpeg(color: str) -> str:
    """Convert a CSS colour (``#fff``, ``#ffffff``, ``rgb()``, ``rgba()``) to FFmpeg syntax.

    Named colours are passed through unchanged; FFmpeg understands the CSS
    names. Alpha becomes an ``@alpha`` suffix.
    """
    color = color.strip()

    match = _HEX_SHORT.match(color)
    if match:
        r, g, b = match.group(1)
        return f"0x{(r * 2 + g * 2 + b * 2).upper()}"

    match = _HEX_LONG.match(color)
    if match:
        return f"0x{match.group(1).upper()}"

    match = _RGB.match(color)
    if match:
        r, g, b = (min(255, int(c)) for c in match.group(1, 2, 3))
        hex_color = f"0x{r:02X}{g:02X}{b:02X}"
        if match.group(4) is not None:
            return f"{hex_color}@{format_number(float(match.group(4)))}"
        return hex_color

    return color


@dataclass(frozen=True)
class FilterExpr:
    """One filter invocation: ``name=key=value:key=value``.

    Arguments with a ``None`` key are positional and render as the bare value.
    """

    name: str
    args: tuple[tuple[str | None, FilterValue], ...] = ()

    def arg(self, key: str | None, value: FilterValue) -> "FilterExpr":
        return FilterExpr(self.name, (*self.args, (key, value)))

    def render(self) -> str:
        if not self.args:
            return self.name
        rendered = [
            format_value(value) if key is None else f"{key}={format_value(value)}"
            for key, value in self.args
        ]
        return f"{self.name}={':'.join(rendered)}"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class FilterNode:
    """A filter placed in a filter graph with labelled inputs and outputs."""

    filter: FilterExpr
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()

    def render(self) -> str:
        ins = "".join(f"[{label}]" for label in self.inputs)
        outs = "".join(f"[{label}]" for label in self.outputs)
        return f"{ins}{self.filter.render()}{outs}"

