# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2026/10/18 14:02:11
# @Author : pyinicache contributors

from enum import Enum


class InsertionType(int, Enum):
    """Where `IniSection.insert_key()` splices a *new* key."""
    FIRST = 0
    BEFORE = 1  # relative to an anchor key
    AFTER = 2   # ditto
    LAST = 3


SECTION_BEGIN = '['
SECTION_END = ']'
COMMENT_MARK = ';'
PAIRING = '='
QUOTE_MARK = '"'

# "blanks" never leave the current line, unlike `str.isspace()`.
BLANKS = ' \t\v\f'
LINE_ENDS = '\r\n'
