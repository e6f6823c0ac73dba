"""Homeserver LMDB storage, record formats, request parameter parsing and response handlers."""