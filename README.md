# pubky

Building blocks for a Pubky homeserver and its clients:

- `pubky.capabilities`: scoped permissions such as `/pub/pubky.app/:rw`.
- `pubky.keys`: Ed25519 keypairs whose public keys are written as 52
  z-base-32 characters.
- `pubky.crypto`: XSalsa20-Poly1305 encryption (`encrypt`, `decrypt`), BLAKE3
  hashing (`hash_bytes`) and randomness (`random_bytes`, `random_hash`).
- `pubky.blakehash`: a pure Python BLAKE3 (`blake3`, incremental `Hasher`).
- `pubky.recovery_file`: a secret key sealed with a passphrase (Argon2id key
  derivation) behind a `pubky.org/recovery` spec line.
- `pubky.timestamp`: strictly increasing microsecond `Timestamp`s with a
  13-character base32 Crockford text form.
- `pubky.homeserver`: an LMDB-backed store of users, entries, chunked blobs and
  a public event feed, plus the logic that turns requests into responses.
- `pubky.listing`, `pubky.authz`, `pubky.errors`: client-side helpers.

Install with `pip install .` (add `.[test]` for the test dependencies).

## Capabilities

```python
from pubky.capabilities import Capabilities, Capability

cap = Capability.parse("/pub/pubky.app/:rw")
print(str(cap))                # /pub/pubky.app/:rw
print(str(Capability.root()))  # /:rw

caps = Capabilities.parse("/pub/pubky.app/:rw,/pub/foo.bar/file:r")
print(cap in caps)             # True
```

Actions are sorted and deduplicated when parsed. A malformed capability raises
`CapabilityError`; when a whole comma separated list is parsed, items that
cannot be parsed are skipped.

## Keys and recovery files

```python
from pubky.keys import Keypair, PublicKey
from pubky.recovery_file import create_recovery_file, decrypt_recovery_file

keypair = Keypair.random()
public_key = keypair.public_key()
assert PublicKey.parse(str(public_key)) == public_key

passphrase = "password"
sealed = create_recovery_file(keypair, passphrase)
recovered = decrypt_recovery_file(sealed, passphrase)
assert recovered.public_key() == public_key
```

`PublicKey.parse` also accepts raw bytes, or a domain or URL whose last label
is the encoded key. A wrong passphrase or a damaged file raises
`RecoveryFileError`; files with the older `pkarr.org/recovery` spec line are
read too.

## Homeserver storage

```python
from pubky.homeserver.database import Database
from pubky.keys import Keypair

public_key = Keypair.random().public_key()

with Database.open("/tmp/pubky-store", map_size=10 * 1024 * 1024) as db:
    with db.write_entry(public_key, "pub/example.com/a.txt") as writer:
        writer.write(b"hello")
        entry = writer.commit()

    print(b"".join(db.read_entry_content(entry)))        # b'hello'
    print(db.list(f"{public_key}/pub/example.com/"))
    print(db.list(f"{public_key}/pub/", shallow=True))   # directories collapsed
    print(db.list_events())
    db.delete_entry(public_key, "pub/example.com/a.txt")
```

Content is buffered in a file under `<storage>/buffers` until `commit`, then
stored in chunks sized by `max_chunk_size()`. Listings accept `reverse`,
`limit` (default 100, capped at 1000 unless other limits are passed to
`Database.open`), `cursor` (a path relative to the listed directory, or a full
`pubky://` URL) and `shallow`.

Every write or delete under `pub/` adds a line to the event feed, of the form
`PUT pubky://...` or `DEL pubky://...`. A non-empty page of events ends with a
`cursor: <timestamp>` line; passing that cursor fetches the next page.

`touch_user` records a user (keeping its original creation time) and
`get_user` reads it back.

## Request handling

`pubky.homeserver.handlers` builds `Response` objects (status, headers, body)
and raises `pubky.homeserver.errors.HttpError` for error statuses:

```python
from pubky.homeserver.extractors import ListQueryParams
from pubky.homeserver.handlers import feed, get_entry, list_directory

params = ListQueryParams.from_query("limit=10&reverse")
response = list_directory(db, public_key, "pub/example.com/", params)
events = feed(db, ListQueryParams.from_query("limit=10"))

entry = db.get_entry(public_key, "pub/example.com/a.txt")
response = get_entry({"If-None-Match": entry.etag}, entry)
print(response.status)   # HTTPStatus.NOT_MODIFIED
```

`get_entry` answers `If-Modified-Since` and `If-None-Match` with 304,
`verify_path` rejects paths outside `pub/` with 403, and `is_secure` tells
whether cookies for a host should be `Secure`. `extract_pubky` and
`extract_entry_path` read the `pubky` and `path` route parameters.

## Client helpers

```python
from pubky.authz import describe_capabilities, requested_capabilities
from pubky.listing import list_url, parse_list_response

print(list_url("https://example.com/pk/pub/example.com/extra", limit=2, cursor="a.txt"))
# https://example.com/pk/pub/example.com/?limit=2&cursor=a.txt

print(parse_list_response(b"pubky://a\npubky://b\n"))  # ['pubky://a', 'pubky://b']

caps = requested_capabilities("pubkyauth:///?caps=/pub/pubky.app/:rw&relay=http://localhost/")
print(describe_capabilities(caps))
# Required Capabilities:
#     /pub/pubky.app/ : [Read, Write]
```

`pubky.errors` holds `PubkyError`, `ResolveEndpointError` and
`InvalidUrlError` for client code.

## What this package does not do

- It does not run an HTTP server: there is no routing, listening socket or
  cookie handling; the handlers only map inputs to `Response` objects.
- It has no sign-up, sign-in or session handling, and does not verify auth
  tokens; the `sessions` table is created but nothing reads or writes it.
- It has no network client: it does not publish or resolve records on a DHT
  or relay, and does not send requests to a homeserver.
- It has no command-line programs.