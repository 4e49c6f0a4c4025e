"""Runtime Classification of Input Values

Every issue records the classified type of the offending data, and
InvalidType issues compare an expected classification against it.
"""
from __future__ import annotations

import inspect
import math
import re
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from .utils import UNDEFINED, Symbol


class ParsedType(str, Enum):
    """Classification of a runtime value. ``bool`` is never classified as ``int``."""
    STRING = "str"
    INTEGER = "int"
    FLOAT = "float"
    NUMBER = "int | float"
    NAN = "NaN"
    BOOLEAN = "bool"
    TRUE = "True"
    FALSE = "False"
    NONE = "None"
    UNDEFINED = "undefined"
    LIST = "list"
    TUPLE = "tuple"
    SEQUENCE = "list | tuple"
    DICT = "dict"
    SET = "set"
    DATETIME = "datetime"
    BYTES = "bytes"
    PATTERN = "Pattern"
    SYMBOL = "symbol"
    ENUM_VALUE = "str | int"
    PRIMITIVE = "primitive"
    AWAITABLE = "awaitable"
    FUNCTION = "function"
    OBJECT = "object"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


def get_parsed_type(data: Any) -> ParsedType:
    """Classify ``data``. Order matters: bool before int, Mapping before callables."""
    if data is UNDEFINED: return ParsedType.UNDEFINED
    if data is None: return ParsedType.NONE
    if isinstance(data, bool): return ParsedType.BOOLEAN
    if isinstance(data, int): return ParsedType.INTEGER
    if isinstance(data, float): return ParsedType.NAN if math.isnan(data) else ParsedType.FLOAT
    if isinstance(data, str): return ParsedType.STRING
    if isinstance(data, (bytes, bytearray)): return ParsedType.BYTES
    if isinstance(data, Symbol): return ParsedType.SYMBOL
    if isinstance(data, datetime): return ParsedType.DATETIME
    if isinstance(data, list): return ParsedType.LIST
    if isinstance(data, tuple): return ParsedType.TUPLE
    if isinstance(data, Mapping): return ParsedType.DICT
    if isinstance(data, (set, frozenset)): return ParsedType.SET
    if isinstance(data, re.Pattern): return ParsedType.PATTERN
    if inspect.isawaitable(data): return ParsedType.AWAITABLE
    if callable(data): return ParsedType.FUNCTION
    return ParsedType.OBJECT


def is_number(data: Any) -> bool:
    """int or finite-or-infinite float, excluding bool and NaN."""
    if isinstance(data, bool): return False
    if isinstance(data, int): return True
    return isinstance(data, float) and not math.isnan(data)
