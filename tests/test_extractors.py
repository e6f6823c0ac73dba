from http import HTTPStatus

import pytest

from pubky.homeserver.errors import HttpError
from pubky.homeserver.extractors import (
    ListQueryParams,
    extract_entry_path,
    extract_pubky,
)
from pubky.keys import Keypair


def test_query_with_all_options():
    params = ListQueryParams.from_query("reverse&shallow&limit=10&cursor=a.txt")
    assert params == ListQueryParams(limit=10, cursor="a.txt", reverse=True, shallow=True)


def test_empty_query_gives_defaults():
    params = ListQueryParams.from_query("")
    assert params == ListQueryParams()
    assert params.reverse is False
    assert params.shallow is False


def test_empty_limit_and_cursor_are_none():
    params = ListQueryParams.from_query("limit=&cursor=")
    assert params.limit is None
    assert params.cursor is None


@pytest.mark.parametrize("limit", ["abc", "-1", "70000", "1.5"])
def test_invalid_limit_is_ignored(limit):
    assert ListQueryParams.from_query(f"limit={limit}").limit is None


def test_leading_question_mark_is_accepted():
    params = ListQueryParams.from_query("?limit=2")
    assert params.limit == 2


def test_mapping_query():
    params = ListQueryParams.from_query({"limit": "3", "reverse": ""})
    assert params.limit == 3
    assert params.reverse is True
    assert params.cursor is None


def test_extract_pubky_roundtrip():
    public_key = Keypair.random().public_key()
    assert extract_pubky({"pubky": str(public_key)}) == public_key


def test_extract_pubky_missing():
    with pytest.raises(HttpError) as info:
        extract_pubky({})
    assert info.value.status == HTTPStatus.NOT_FOUND
    assert info.value.detail == "pubky param missing"


def test_extract_pubky_invalid():
    with pytest.raises(HttpError) as info:
        extract_pubky({"pubky": "not-a-key"})
    assert info.value.status == HTTPStatus.BAD_REQUEST


def test_extract_entry_path():
    assert extract_entry_path({"path": "pub/foo.txt"}) == "pub/foo.txt"


def test_extract_entry_path_missing():
    with pytest.raises(HttpError) as info:
        extract_entry_path({"pubky": "x"})
    assert info.value.status == HTTPStatus.NOT_FOUND
    assert info.value.detail == "entry path missing"