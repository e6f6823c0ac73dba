from urllib.parse import parse_qsl, urlsplit

import pytest

from pubky.listing import list_url, parse_list_response

BASE = "https://homeserver.example.com"


def test_path_trimmed_to_directory():
    url = list_url(BASE + "/pub/example.com/extra")
    assert url == BASE + "/pub/example.com/"


def test_directory_path_kept():
    url = list_url(BASE + "/pub/example.com/")
    assert urlsplit(url).path == "/pub/example.com/"
    assert urlsplit(url).query == ""


def test_empty_path_becomes_root():
    assert urlsplit(list_url(BASE)).path == "/"


def test_flags_are_key_only():
    query = urlsplit(list_url(BASE + "/pub/", reverse=True, shallow=True)).query
    assert query.split("&") == ["reverse", "shallow"]


def test_limit_and_cursor_round_trip():
    cursor = "pubky://key/pub/example.com/a b.txt"
    url = list_url(BASE + "/pub/example.com/", limit=2, cursor=cursor)
    pairs = dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))
    assert pairs == {"limit": "2", "cursor": cursor}


def test_existing_query_preserved():
    url = list_url(BASE + "/pub/x?foo=bar", reverse=True)
    assert urlsplit(url).query.split("&") == ["foo=bar", "reverse"]


def test_host_and_port_preserved():
    url = list_url("http://localhost:15411/pub/a/b", limit=0)
    parts = urlsplit(url)
    assert parts.netloc == "localhost:15411"
    assert parts.path == "/pub/a/"
    assert dict(parse_qsl(parts.query)) == {"limit": "0"}


@pytest.mark.parametrize("limit", [-1, 0x10000])
def test_limit_out_of_range(limit):
    with pytest.raises(ValueError):
        list_url(BASE + "/pub/", limit=limit)


def test_parse_lines():
    urls = ["pubky://k/pub/example.com/a.txt", "pubky://k/pub/example.com/b.txt"]
    assert parse_list_response("\n".join(urls).encode()) == urls


def test_parse_trailing_newline_and_crlf():
    assert parse_list_response(b"a\r\nb\n") == ["a", "b"]


def test_parse_empty_body():
    assert parse_list_response(b"") == []


def test_parse_invalid_utf8_is_lenient():
    lines = parse_list_response(b"ok\n\xffbad")
    assert lines[0] == "ok"
    assert lines[1].endswith("bad")
    assert "\ufffd" in lines[1]