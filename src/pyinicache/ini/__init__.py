# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2026/10/18 15:40:02
# @Author : pyinicache contributors

from .consts import InsertionType
from .model import (
    IniCache,
    IniIterator,
    IniKey,
    IniSection,
    InvalidIniParameter
)
from .parser import IniCacheParser, IniYamlParser, decode_buffer
