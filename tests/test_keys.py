import pytest

from pubky.keys import Keypair, PublicKey, z32_decode, z32_encode


@pytest.mark.parametrize("data", [b"", b"\x00", b"\xff", b"hello", bytes(range(32)), bytes(33)])
def test_z32_round_trip(data):
    assert z32_decode(z32_encode(data)) == data


def test_z32_zero_key_encoding():
    assert z32_encode(bytes(32)) == "y" * 52


def test_z32_encoded_length():
    assert len(z32_encode(bytes(32))) == 52


def test_z32_invalid_character():
    with pytest.raises(ValueError):
        z32_decode("l0v2")


def test_rfc8032_public_key():
    seed = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
    keypair = Keypair.from_secret_key(seed)
    assert keypair.public_key().to_bytes().hex() == (
        "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"
    )
    assert keypair.secret_key() == seed


def test_public_key_string_round_trip():
    public_key = Keypair.random().public_key()
    text = str(public_key)
    assert len(text) == 52
    assert PublicKey.parse(text) == public_key


@pytest.mark.parametrize(
    "template",
    [
        "pubky://{}/pub/foo.txt",
        "_pubky.{}",
        "foo.bar.{}",
        "https://{}:8080/path",
        "{}",
    ],
)
def test_parse_extracts_key(template):
    public_key = Keypair.random().public_key()
    assert PublicKey.parse(template.format(public_key)) == public_key


def test_parse_from_bytes():
    public_key = Keypair.random().public_key()
    assert PublicKey.parse(public_key.to_bytes()) == public_key


@pytest.mark.parametrize("value", ["localhost", "example.com", "", "y" * 51])
def test_parse_invalid(value):
    with pytest.raises(ValueError):
        PublicKey.parse(value)


def test_public_key_wrong_length():
    with pytest.raises(ValueError):
        PublicKey(bytes(31))


def test_sign_and_verify():
    keypair = Keypair.random()
    signature = keypair.sign(b"message")
    assert len(signature) == 64
    assert keypair.public_key().verify(signature, b"message") is True
    assert keypair.public_key().verify(signature, b"other") is False
    assert Keypair.random().public_key().verify(signature, b"message") is False


def test_keypair_from_secret_is_deterministic():
    keypair = Keypair.random()
    restored = Keypair.from_secret_key(keypair.secret_key())
    assert restored == keypair
    assert restored.public_key() == keypair.public_key()


def test_keypair_bad_secret_length():
    with pytest.raises(ValueError):
        Keypair.from_secret_key(bytes(16))