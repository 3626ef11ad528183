"""Argument vector construction for memvid sub-commands."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def to_flag(key: str) -> str:
    """``rebuild_lex_index`` -> ``--rebuild-lex-index``."""
    return "--" + key.replace("_", "-")


def build_args(base_args: Sequence[str], options: Mapping[str, Any]) -> list[str]:
    """
    Append flags for ``options`` after ``base_args``.

    - None: skipped
    - True: bare flag; False: skipped
    - list/tuple: flag followed by comma-joined values
    - anything else: flag followed by str(value)

    Order follows the mapping's iteration order. Keys are not checked here,
    the tool input models own that.
    """
    args = list(base_args)

    for key, value in options.items():
        if value is None:
            continue

        flag = to_flag(key)

        if isinstance(value, bool):
            if value:
                args.append(flag)
        elif isinstance(value, (list, tuple)):
            args.extend([flag, ",".join(str(v) for v in value)])
        else:
            args.extend([flag, str(value)])

    return args
