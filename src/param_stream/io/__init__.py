"""Cursor, shape assembly and the reader/writer facades."""

from .assembler import assemble, flatten
from .cursor import BufferCursor
from .dispatch import DECODE_MODES, DecodeMode, check_value, decode
from .reader import ParameterReader
from .writer import ParameterWriter

__all__ = [
    "BufferCursor",
    "DECODE_MODES",
    "DecodeMode",
    "ParameterReader",
    "ParameterWriter",
    "assemble",
    "check_value",
    "decode",
    "flatten",
]
