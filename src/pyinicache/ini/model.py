# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2026/10/18 14:31:05
# @Author : pyinicache contributors

"""
In-memory INI cache: ordered sections, each holding ordered key/value pairs.

Names are matched case-insensitively, both for sections and keys,
while the spelling first inserted is the one kept (and saved).
"""

from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass

from .consts import InsertionType

__all__ = [
    'InvalidIniParameter', 'IniKey', 'IniSection', 'IniCache', 'IniIterator'
]


class InvalidIniParameter(ValueError):
    """Empty, `None` or non-string name or value given to the cache."""
    pass


def _check_text(what: str, text: object) -> str:
    if not isinstance(text, str) or not text:
        raise InvalidIniParameter(f'{what} must be a non-empty str: {text!r}')
    return text


# compared by identity, as it's the handle used for anchored insertion.
@dataclass(eq=False)
class IniKey:
    name: str
    value: str


class IniSection(MutableMapping[str, str]):
    """One `[section]` and its keys, in order.

    `section[key] = value` appends a new key, or rewrites the value of an
    existing one in place. Use `insert_key()` to place a key elsewhere.
    """
    def __init__(self, name: str) -> None:
        self._name = _check_text('Section name', name)
        self.__keys: list[IniKey] = []
        self.__index: dict[str, IniKey] = {}
        # bumped on each change of the key sequence, see `IniIterator`.
        self._generation = 0

    @property
    def name(self) -> str:
        return self._name

    def find_key(self, name: str) -> IniKey | None:
        if not isinstance(name, str):
            return None
        return self.__index.get(name.casefold())

    def get_key(self, name: str) -> str:
        """Value of key `name`. Raises `KeyError` if there's no such key."""
        if (key := self.find_key(name)) is None:
            raise KeyError(name)
        return key.value

    def insert_key(
        self,
        anchor: IniKey | None,
        mode: InsertionType,
        name: str,
        value: str
    ) -> IniKey:
        """Add a key at the position given by `mode` and `anchor`.

        If the section already has a key called `name`, only its value gets
        replaced; the key stays where it is, `anchor` and `mode` are ignored.

        `BEFORE`/`AFTER` an anchor which is `None` (or not a key of this
        section) fall back to `FIRST`/`LAST`.
        """
        _check_text('Key name', name)
        _check_text('Key value', value)
        mode = InsertionType(mode)

        if (key := self.find_key(name)) is not None:
            key.value = value
            return key

        key = IniKey(name, value)
        where = self.__position(anchor)
        if mode is InsertionType.FIRST or (
            mode is InsertionType.BEFORE and where is None
        ):
            where = 0
        elif mode is InsertionType.AFTER and where is not None:
            where += 1
        elif mode is not InsertionType.BEFORE:
            where = len(self.__keys)
        self.__keys.insert(where, key)
        self.__index[name.casefold()] = key
        self._generation += 1
        return key

    def add_key(self, name: str, value: str) -> IniKey:
        return self.insert_key(None, InsertionType.LAST, name, value)

    def remove_key(self, name: str) -> IniKey:
        if (key := self.find_key(name)) is None:
            raise KeyError(name)
        del self.__index[name.casefold()]
        self.__keys.remove(key)
        self._generation += 1
        return key

    def find_first_value(self) -> tuple[str, str, 'IniIterator'] | None:
        """Start walking the keys.

        Returns the first `(name, value)` together with an iterator to
        continue with, or `None` when the section has no key.
        """
        if not self.__keys:
            return None
        first = self.__keys[0]
        return first.name, first.value, IniIterator(self)

    def _key_at(self, index: int) -> IniKey | None:
        return self.__keys[index] if index < len(self.__keys) else None

    def _clear(self) -> None:
        self.__keys.clear()
        self.__index.clear()
        self._generation += 1

    def keys_list(self) -> list[IniKey]:
        """Snapshot of the key handles, in order."""
        return self.__keys.copy()

    def to_dict(self) -> dict[str, str]:
        return {k.name: k.value for k in self.__keys}

    def __position(self, anchor: IniKey | None) -> int | None:
        if anchor is None:
            return None
        for i, key in enumerate(self.__keys):
            if key is anchor:
                return i
        return None

    def __getitem__(self, key: str) -> str:
        return self.get_key(key)

    def __setitem__(self, key: str, value: str) -> None:
        self.add_key(key, value)

    def __delitem__(self, key: str) -> None:
        self.remove_key(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self.__index

    def __len__(self) -> int:
        return len(self.__keys)

    def __iter__(self) -> Iterator[str]:
        generation, i = self._generation, 0
        while True:
            if self._generation != generation:
                raise RuntimeError(
                    f'Keys of [{self._name}] changed during iteration.')
            if i >= len(self.__keys):
                return
            yield self.__keys[i].name
            i += 1

    def __str__(self) -> str:
        return f'[{self._name}]'

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self._name, len(self.__keys))


class IniIterator:
    """Cursor over the keys of one section, from `find_first_value()`.

    Inserting or removing keys of that section while the iterator is
    alive is a programming error: the next `next_value()` raises
    `RuntimeError` instead of going on from a stale position.
    Rewriting values of existing keys is fine.
    """
    def __init__(self, section: IniSection) -> None:
        self._section: IniSection | None = section
        self._index = 0
        self._generation = section._generation

    def next_value(self) -> tuple[str, str] | None:
        """Next `(name, value)`, or `None` once the keys run out."""
        if self._section is None:
            raise ValueError('Iterating over a closed IniIterator.')
        if self._section._generation != self._generation:
            raise RuntimeError(
                f'Keys of {self._section} changed during iteration.')
        if (key := self._section._key_at(self._index + 1)) is None:
            return None
        self._index += 1
        return key.name, key.value

    def close(self) -> None:
        # the section itself is left untouched.
        self._section = None

    @property
    def closed(self) -> bool:
        return self._section is None

    def __enter__(self) -> 'IniIterator':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class IniCache(MutableMapping[str, IniSection]):
    """A whole INI file. Sections are kept in the order they were added.

    `cache[name]` gives the `IniSection` itself (not a copy), so changes
    made through it land in the cache.
    """
    def __init__(self) -> None:
        self.__sections: list[IniSection] = []
        self.__index: dict[str, IniSection] = {}

    def get_section(self, name: str) -> IniSection | None:
        if not isinstance(name, str):
            return None
        return self.__index.get(name.casefold())

    def add_section(self, name: str) -> IniSection:
        """Append an empty section, or return the one already named so."""
        _check_text('Section name', name)
        if (section := self.get_section(name)) is not None:
            return section
        section = IniSection(name)
        self.__sections.append(section)
        self.__index[name.casefold()] = section
        return section

    def remove_section(self, name: str) -> IniSection:
        if (section := self.get_section(name)) is None:
            raise KeyError(name)
        del self.__index[name.casefold()]
        self.__sections.remove(section)
        return section

    def rename(self, old: str, new: str) -> bool:
        """Rename a section, keeping its position.

        Returns:
            `True` if succeed, otherwise `False`.
            May not success if `old` is not found or `new` already exists
            (other than as a different spelling of `old`).
        """
        _check_text('Section name', new)
        if (section := self.get_section(old)) is None:
            return False
        if (other := self.get_section(new)) is not None and other is not section:
            return False
        del self.__index[section.name.casefold()]
        section._name = new
        self.__index[new.casefold()] = section
        return True

    def destroy(self) -> None:
        """Drop every section along with its keys.

        Sections, keys and iterators obtained before are left detached;
        using them afterwards is undefined behaviour.
        """
        for section in self.__sections:
            section._clear()
        self.__sections.clear()
        self.__index.clear()

    def __getitem__(self, key: str) -> IniSection:
        if (section := self.get_section(key)) is None:
            raise KeyError(key)
        return section

    def __setitem__(
        self, key: str, value: IniSection | Mapping[str, str]
    ) -> None:
        # merged into the existing section, if any.
        _check_text('Section name', key)
        if (current := self.get_section(key)) is not None and value is current:
            return
        pairs = list(value.items())
        for k, v in pairs:
            _check_text('Key name', k)
            _check_text('Key value', v)
        section = self.add_section(key)
        for k, v in pairs:
            section.add_key(k, v)

    def __delitem__(self, key: str) -> None:
        self.remove_section(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self.__index

    def __len__(self) -> int:
        return len(self.__sections)

    def __iter__(self) -> Iterator[str]:
        return iter([i.name for i in self.__sections])
