import io
import logging
from pathlib import Path

import pytest

from pyinicache import IniCache, IniCacheParser, IniYamlParser, decode_buffer

loads = IniCacheParser.loads
dumps = IniCacheParser.dumps


def snapshot(cache: IniCache) -> list[tuple[str, list[tuple[str, str]]]]:
    return [(s.name, list(s.items())) for s in cache.values()]


def test_two_sections() -> None:
    cache = loads(b'[A]\r\nx=1\r\n\r\n[B]\r\ny=2\r\n')
    assert snapshot(cache) == [('A', [('x', '1')]), ('B', [('y', '2')])]
    name, value, it = cache['A'].find_first_value()
    assert (name, value) == ('x', '1')
    assert it.next_value() is None


def test_comment_line_produces_no_entry() -> None:
    cache = loads(b'[A]\r\n; comment\r\nx=1\r\n')
    assert snapshot(cache) == [('A', [('x', '1')])]


def test_key_without_equal_is_dropped() -> None:
    cache = loads(b'[A]\r\nbadkey\r\n')
    assert snapshot(cache) == [('A', [])]


def test_broken_key_does_not_stop_parsing() -> None:
    cache = loads('[A]\r\nbadkey\r\nx=1\r\n=orphan\r\nempty=\r\ny=2\r\n')
    assert snapshot(cache) == [('A', [('x', '1'), ('y', '2')])]


def test_comment_before_next_header() -> None:
    cache = loads('[A]\r\nx=1\r\n; about B\r\n[B]\r\ny=2\r\n')
    assert snapshot(cache) == [('A', [('x', '1')]), ('B', [('y', '2')])]


def test_lines_before_first_section_are_ignored() -> None:
    cache = loads('loose=1\r\n; note\r\n[A]\r\nx=1\r\n')
    assert snapshot(cache) == [('A', [('x', '1')])]


def test_bad_header_skips_its_entries() -> None:
    cache = loads('[]\r\nx=1\r\n[Open\r\ny=2\r\n[B]\r\nz=3\r\n')
    assert snapshot(cache) == [('B', [('z', '3')])]


def test_repeated_section_and_key_merge() -> None:
    cache = loads('[A]\r\nx=1\r\ny=2\r\n[a]\r\nX=3\r\n')
    assert snapshot(cache) == [('A', [('x', '3'), ('y', '2')])]


def test_inline_comment_ends_plain_value() -> None:
    cache = loads('[A]\r\nKeyName=Value ; trailing\r\nnext=1\r\n')
    assert snapshot(cache) == [('A', [('KeyName', 'Value '), ('next', '1')])]


def test_quoted_values() -> None:
    buf = '[A]\r\nq = "a;b" tail\r\np="x"\r\n'
    assert loads(buf, quoted_values=True)['A'].to_dict() == {
        'q': 'a;b', 'p': 'x'}
    assert loads(buf)['A'].to_dict() == {'q': '"a', 'p': '"x"'}


def test_lf_only_and_no_trailing_newline() -> None:
    cache = loads('[A]\nx=1\ny = two words')
    assert snapshot(cache) == [('A', [('x', '1'), ('y', 'two words')])]


def test_nothing_usable_is_an_empty_cache() -> None:
    assert len(loads(b'')) == 0
    assert len(loads('; only a comment\r\n')) == 0


def test_text_after_nul_is_ignored() -> None:
    raw = b'[A]\r\nx=1\r\n\x00[B]\r\ny=2\r\n'
    assert list(loads(raw, encoding='ascii')) == ['A']
    assert list(loads(raw.decode('ascii'))) == ['A']


def test_malformed_input_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger='pyinicache')
    loads('[A]\r\nempty=\r\n')
    assert 'Entry skipped' in caplog.text


def test_dumps_layout() -> None:
    cache = IniCache()
    cache['A'] = {'x': '1', 'y': 'two'}
    cache['B'] = {'z': '3'}
    cache.add_section('C')
    assert dumps(cache) == (
        '[A]\r\nx=1\r\ny=two\r\n'
        '\r\n'
        '[B]\r\nz=3\r\n'
        '\r\n'
        '[C]\r\n')
    assert dumps(cache, newline='\n', blank_lines=0, delimiter=' = ') == (
        '[A]\nx = 1\ny = two\n[B]\nz = 3\n[C]\n')
    assert dumps(IniCache()) == ''


def test_dumps_warns_on_values_it_cannot_keep() -> None:
    cache = loads('[A]\r\nq="a;b"\r\n', quoted_values=True)
    with pytest.warns(UserWarning):
        text = dumps(cache)
    assert text == '[A]\r\nq=a;b\r\n'


def test_round_trip_keeps_entries() -> None:
    src = (
        '; header comment\r\n'
        '[Setup]\r\n'
        '  Name = ReactOS \r\n'
        'Version=0.4 ; comment\r\n'
        '\r\n'
        '[ Files ]\r\n'
        'a.dll=1\r\n'
        'b.sys = 2\r\n'
    )
    first = loads(src)
    second = loads(dumps(first))
    assert snapshot(second) == snapshot(first)
    assert dumps(second) == dumps(first)


def test_decode_buffer_codecs() -> None:
    text = '[A]\r\nx=1\r\n'
    assert decode_buffer(text.encode('utf-16')) == text
    assert decode_buffer(text.encode('utf-8-sig')) == text
    assert decode_buffer(text.encode('ascii')) == text
    assert decode_buffer('[Ä]\r\n'.encode('latin-1'), 'latin-1') == '[Ä]\r\n'


def test_decode_buffer_falls_back_when_encoding_is_wrong() -> None:
    raw = '[A]\r\nx=1\r\n'.encode('utf-16')
    assert decode_buffer(raw, 'utf-8') == '[A]\r\nx=1\r\n'


def test_wide_buffer_loads_like_narrow_one() -> None:
    text = '[A]\r\nx=1\r\n'
    assert snapshot(loads(text.encode('utf-16'))) == snapshot(
        loads(text.encode('ascii')))


def test_read_and_write_path(tmp_path: Path) -> None:
    path = tmp_path / 'setup.ini'
    path.write_bytes(b'[A]\r\nx=1\r\n')
    parser = IniCacheParser(path)
    cache = parser.read()
    cache['A'].add_key('y', '2')
    cache.add_section('B').add_key('z', '3')
    parser.write(cache)
    assert path.read_bytes() == b'[A]\r\nx=1\r\ny=2\r\n\r\n[B]\r\nz=3\r\n'
    assert str(parser) == f'INI cache: {path}(None)'


def test_write_supersedes_old_content(tmp_path: Path) -> None:
    path = tmp_path / 'big.ini'
    path.write_bytes(b'[Old]\r\n' + b'k=v\r\n' * 100)
    cache = IniCache()
    cache['New'] = {'a': 'b'}
    IniCacheParser(path).write(cache)
    assert path.read_bytes() == b'[New]\r\na=b\r\n'


def test_write_with_wide_encoding(tmp_path: Path) -> None:
    path = tmp_path / 'wide.ini'
    cache = IniCache()
    cache['Ü'] = {'k': 'v'}
    IniCacheParser(path, 'utf-16').write(cache)
    assert path.read_bytes().decode('utf-16') == '[Ü]\r\nk=v\r\n'
    assert snapshot(IniCacheParser(path).read()) == [('Ü', [('k', 'v')])]


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        IniCacheParser(tmp_path / 'missing.ini').read()


def test_empty_file_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / 'empty.ini'
    path.write_bytes(b'')
    assert len(IniCacheParser(path).read()) == 0


def test_streams() -> None:
    parser = IniCacheParser('unused.ini', quoted_values=True)
    cache = parser.readstream(io.BytesIO(b'[A]\r\nx="1 ; 2"\r\n'))
    assert cache['a']['X'] == '1 ; 2'
    del cache['A']['x']
    cache['A']['y'] = '3'
    out = io.BytesIO()
    parser.writestream(out, cache)
    assert out.getvalue() == b'[A]\r\ny=3\r\n'


def test_yaml_round_trip(tmp_path: Path) -> None:
    cache = loads('[Zeta]\r\nb=2\r\na=1\r\n[Alpha]\r\n0=GACNST\r\n')
    handler = IniYamlParser(tmp_path / 'cache.yaml')
    handler.write(cache)
    again = handler.read()
    assert snapshot(again) == snapshot(cache)


def test_yaml_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / 'list.yaml'
    path.write_text('- a\n- b\n', encoding='utf-8')
    with pytest.raises(ValueError):
        IniYamlParser(path).read()


def test_yaml_skips_empty_values(tmp_path: Path) -> None:
    path = tmp_path / 'sparse.yaml'
    path.write_text('A:\n  x: 1\n  y:\n  z: ""\nB:\n', encoding='utf-8')
    cache = IniYamlParser(path).read()
    assert snapshot(cache) == [('A', [('x', '1')]), ('B', [])]


def test_readstream_accepts_text_handle() -> None:
    cache = IniCacheParser('unused.ini').readstream(io.StringIO('[A]\nx=1\n'))
    assert snapshot(cache) == [('A', [('x', '1')])]
