import pytest

from pubky.errors import InvalidUrlError, PubkyError, ResolveEndpointError


def _caught_as(exc_type, error):
    """Raise ``error`` and return it if it is caught as ``exc_type``."""
    try:
        raise error
    except exc_type as caught:
        return caught


def test_generic_error_message():
    error = PubkyError("Invalid relay Url")
    assert str(error) == "Generic error: Invalid relay Url"
    assert error.detail == "Invalid relay Url"


def test_resolve_endpoint_message_and_target():
    target = "_pubky.example"
    error = ResolveEndpointError(target)
    assert str(error) == f"Could not resolve endpoint for {target}"
    assert error.target == target


def test_invalid_url_message():
    error = InvalidUrlError()
    assert str(error) == "Could not convert the passed type into a Url"


def test_invalid_url_ignores_detail_in_message():
    error = InvalidUrlError("not a url")
    assert str(error) == "Could not convert the passed type into a Url"
    assert error.detail == "not a url"


def test_subclasses_caught_as_pubky_error():
    resolve_error = ResolveEndpointError("x")
    caught = _caught_as(PubkyError, resolve_error)
    assert caught is resolve_error
    assert caught.target == "x"
    assert str(caught) == "Could not resolve endpoint for x"

    url_error = InvalidUrlError()
    caught = _caught_as(PubkyError, url_error)
    assert caught is url_error
    assert str(caught) == "Could not convert the passed type into a Url"


def test_invalid_url_is_value_error():
    url_error = InvalidUrlError("bad")
    caught = _caught_as(ValueError, url_error)
    assert caught is url_error
    assert caught.detail == "bad"
    assert str(caught) == "Could not convert the passed type into a Url"


def test_resolve_endpoint_not_caught_as_invalid_url():
    with pytest.raises(ResolveEndpointError) as info:
        _caught_as(InvalidUrlError, ResolveEndpointError("y"))
    assert info.value.target == "y"