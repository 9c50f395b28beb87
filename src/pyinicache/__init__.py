# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2026/10/18 13:55:20
# @Author : pyinicache contributors

import logging

from .ini import (
    IniCache,
    IniCacheParser,
    IniIterator,
    IniKey,
    IniSection,
    IniYamlParser,
    InsertionType,
    InvalidIniParameter,
    decode_buffer
)

__all__ = [
    'IniCache', 'IniSection', 'IniKey', 'IniIterator', 'InsertionType',
    'InvalidIniParameter',
    'IniCacheParser', 'IniYamlParser', 'decode_buffer'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
