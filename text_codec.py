from dataclasses import dataclass
import re
from typing import Any, Callable

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class TextCodec:
    """
    A pair of conversions between a value and its text form.

    `from_text` must raise ValueError when the text cannot be parsed.
    """

    to_text: Callable[[Any], str]
    from_text: Callable[[str], Any]


def _int_from_text(text: str) -> int:
    # Plain ASCII digits with an optional sign
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid int literal: {text!r}")
    return int(text)


def _float_from_text(text: str) -> float:
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid float literal: {text!r}")
    return float(text)


def _bool_to_text(value: bool) -> str:
    return "true" if value else "false"


def _bool_from_text(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"invalid bool literal: {text!r}")


STR_CODEC = TextCodec(to_text=str, from_text=str)
INT_CODEC = TextCodec(to_text=str, from_text=_int_from_text)
FLOAT_CODEC = TextCodec(to_text=repr, from_text=_float_from_text)
BOOL_CODEC = TextCodec(to_text=_bool_to_text, from_text=_bool_from_text)
