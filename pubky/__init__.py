"""Pubky capabilities, keys, encryption, recovery files, timestamps, homeserver storage and client helpers."""

__version__ = "0.1.0"