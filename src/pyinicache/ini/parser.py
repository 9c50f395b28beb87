# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2026/10/18 15:12:40
# @Author : pyinicache contributors

"""Load an `IniCache` from text, and render it back.

Only a subset of INI is understood:

    ```ini
    [Section]
    Key=Value
    Quoted="a;b"    ; only with `quoted_values=True`
    ; a full line comment
    ```

Comments are dropped on load, and saved text is normalized
(`Name=Value` lines, no quoting), so a load-save round trip keeps the
entries but not the exact bytes.
"""

import codecs
import logging
from os import PathLike
from typing import BinaryIO, TextIO
from warnings import warn

import chardet
import yaml

from ..abstract import FileHandler
from .consts import COMMENT_MARK, LINE_ENDS, SECTION_BEGIN
from .model import IniCache, IniSection, InvalidIniParameter
from .scanner import (
    read_key_name,
    read_key_value,
    read_section_name,
    skip_to_next_section,
    skip_whitespace
)

__all__ = ['IniCacheParser', 'IniYamlParser', 'decode_buffer']

logger = logging.getLogger(__name__)

_BOMS = (
    (codecs.BOM_UTF8, 'utf-8-sig'),
    (codecs.BOM_UTF16_LE, 'utf-16'),
    (codecs.BOM_UTF16_BE, 'utf-16'),
)


def decode_buffer(raw: bytes, encoding: str | None = None) -> str:
    """Turn raw file bytes into text, narrow (ANSI) or wide (UTF-16) alike.

    An explicit `encoding` is tried first; if it's wrong (or not given),
    BOMs are looked for, then `chardet` guesses, and latin-1 catches all.
    Anything after a NUL character is ignored.
    """
    text = None
    if encoding is not None:
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError:
            logger.info('Not a valid %s buffer, guessing codec.', encoding)
    if text is None:
        for bom, codec in _BOMS:
            if raw.startswith(bom):
                text = raw.decode(codec)
                break
    if text is None:
        guess = chardet.detect(raw)
        codec = guess['encoding']
        if codec is None or guess['confidence'] < 0.8:
            codec = 'utf-8'
        # fallbacks
        try:
            text = raw.decode(codec)
        except (UnicodeDecodeError, LookupError):
            logger.warning('Unable to decode as %s, using latin-1.', codec)
            text = raw.decode('latin-1')
    return text.split('\x00', 1)[0]


class IniCacheParser(FileHandler[IniCache]):
    def __init__(
        self,
        filename: str | PathLike[str],
        encoding: str | None = None, *,
        quoted_values: bool = False
    ) -> None:
        """`encoding` is used to save, and tried first to load.
        When `None`, loading guesses it and saving goes with utf-8.

        With `quoted_values`, `key = "..."` keeps whatever lies between
        the quotes, `;` included.
        """
        super().__init__(filename)
        self._codec = encoding
        self._quoted = quoted_values

    @staticmethod
    def loads(
        buf: bytes | str,
        quoted_values: bool = False,
        encoding: str | None = None
    ) -> IniCache:
        """Parse a whole INI buffer.

        Broken lines are skipped (and logged in debug level), never raised:
        - a bad `[header]` drops everything up to the next header,
        - lines before the first header are ignored,
        - a key without `=`, or with an empty name or value, is left out.
        """
        if isinstance(buf, (bytes, bytearray)):
            buf = decode_buffer(bytes(buf), encoding)
        else:
            buf = buf.split('\x00', 1)[0]

        ret = IniCache()
        section: IniSection | None = None
        pos = skip_whitespace(buf, 0)
        while pos is not None:
            if buf[pos] == SECTION_BEGIN:
                name, pos = read_section_name(buf, pos + 1)
                section = None
                try:
                    section = ret.add_section(name)
                except InvalidIniParameter:
                    logger.debug('Bad section header, skipped to next one.')
                    pos = skip_to_next_section(buf, pos)
            elif section is None:
                logger.debug('Not in any section, skipped to next one.')
                pos = skip_to_next_section(buf, pos)
            else:
                name, pos = read_key_name(buf, pos)
                if name is not None:
                    value, pos = read_key_value(buf, pos, quoted_values)
                    logger.debug('%s: %r = %r', section, name, value)
                    try:
                        section.add_key(name, value)
                    except InvalidIniParameter as e:
                        logger.debug('Entry skipped. %s', e)
            pos = skip_whitespace(buf, pos)
        return ret

    @staticmethod
    def dumps(
        instance: IniCache, *,
        newline: str = '\r\n',
        blank_lines: int = 1,
        delimiter: str = '='
    ) -> str:
        """Render as INI text.

        Values are written as is, never quoted, so a value holding
        a line break or `;` won't read back the same (and is warned).
        """
        buffers = []
        for section in instance.values():
            lines = [f'[{section.name}]']
            for key in section.keys_list():
                if any(i in key.value for i in LINE_ENDS + COMMENT_MARK):
                    warn(f'{section} {key.name}={key.value!r} is saved '
                         'unquoted and will not be read back the same.')
                lines.append(f'{key.name}{delimiter}{key.value}')
            buffers.append(''.join(i + newline for i in lines))
        return (newline * blank_lines).join(buffers)

    def readstream(self, fp: BinaryIO | TextIO) -> IniCache:
        """Load from an already opened file; read from the start of it."""
        raw = fp.read()
        if isinstance(raw, str):
            return self.loads(raw, self._quoted)
        return self.loads(raw, self._quoted, self._codec)

    def writestream(self, fp: BinaryIO, instance: IniCache, **kwargs) -> None:
        """Save into an already opened binary file.

        Keyword arguments go to `dumps()`.
        """
        fp.write(self.dumps(instance, **kwargs).encode(self._codec or 'utf-8'))

    def read(self) -> IniCache:
        """Load the file this parser points to.

        `OSError` goes up as is, so a missing file is told apart from
        an empty one (which loads as an empty `IniCache`).
        """
        with open(self._fn, 'rb') as fp:
            return self.readstream(fp)

    def write(self, instance: IniCache, **kwargs) -> None:
        """Save to the file this parser points to, replacing it."""
        with open(self._fn, 'wb') as fp:
            self.writestream(fp, instance, **kwargs)

    def __str__(self) -> str:
        return "INI cache: " + super().__str__() + f"({self._codec})"


class IniYamlParser(FileHandler[IniCache]):
    """Keeps an `IniCache` as YAML, one mapping per section:

        ```yaml
        Section:
          Key: Value
        ```
    """
    def __init__(
        self, filename: str | PathLike[str], encoding: str = 'utf-8'
    ) -> None:
        super().__init__(filename)
        self._codec = encoding

    def read(self) -> IniCache:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            src = yaml.safe_load(fp)
        ret = IniCache()
        if src is None:
            return ret
        if not isinstance(src, dict):
            raise ValueError(f'{self._fn} is not a mapping of INI sections.')
        for name, pairs in src.items():
            if not isinstance(pairs, dict | None):
                raise ValueError(f'Section "{name}" in {self._fn} '
                                 'is not a mapping.')
            section = ret.add_section(str(name))
            for k, v in (pairs or {}).items():
                # may there be some pure digits considered as int
                if v is None or str(v) == '':
                    logger.debug('[%s] %s has no value, skipped.', name, k)
                    continue
                section.add_key(str(k), str(v))
        return ret

    def write(self, instance: IniCache) -> None:
        data = {i.name: i.to_dict() for i in instance.values()}
        with open(self._fn, 'w', encoding=self._codec) as fp:
            yaml.safe_dump(data, fp, allow_unicode=True,
                           sort_keys=False, default_flow_style=False)
