import json
import logging
import string
import sys
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from moyenne.lib.json import JSONEncoder, JSONValue

from .style import LogStyle

ReservedKeys = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "color_message"}


class ExtraFormatter(logging.Formatter):
    """
    Wraps a base formatter and appends the record's `extra=` fields as JSON,
    highlighted when stderr is a terminal
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None = None,
        datefmt: str | None = None,
        indent: bool = False,
        pyg_style: type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        validate: bool = True,
        *,
        defaults: t.Any = None,
        **kwargs: t.Any,
    ):
        self.base = base(format, datefmt=datefmt, style=style, validate=validate, defaults=defaults, **kwargs)
        self.pyg_style = pyg_style
        self.indent = indent

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if "\n" in msg:
            formatted = self.base.format(record)
            idx = formatted.find(msg)
            indent = " " * len([c for c in formatted[:idx] if c in string.printable])
            line, *lines = msg.splitlines()
            body = textwrap.indent("\n".join(lines), prefix=indent)
            record.msg = record.message = f"{line}\n{body}"
            record.args = None
        message = self.base.format(record)

        d = record.__dict__
        extra = {k: d[k] for k in sorted(set(d.keys()) - ReservedKeys)}
        if not extra:
            return message

        encoder = JSONEncoder()

        def encode(obj: t.Any) -> JSONValue:
            try:
                return encoder.default(obj)
            except TypeError:
                return repr(obj)

        js = json.dumps(extra, indent=(4 if self.indent else None), default=encode)
        if sys.stderr.isatty() and not getattr(self.base, "no_color", False):
            hl = pygments.highlight  # pyright: ignore [reportUnknownMemberType, reportUnknownVariableType]
            js = hl(js, JsonLexer(), Terminal256Formatter(style=self.pyg_style), None)
        return message + " " + js.strip()

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)
