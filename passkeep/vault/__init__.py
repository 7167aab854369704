"""
Credential vault - plaintext credential storage and password generation.
"""

from .backend import KeyValueBackend, MemoryBackend, SQLiteBackend
from .store import CredentialEntry, CredentialStore, ValidationError, STORAGE_KEY
from .generator import (
    CharClass,
    GeneratorOptions,
    InvalidLengthError,
    clamp_length,
    compose_pool,
    generate_password,
    parse_length,
    MIN_LENGTH,
    MAX_LENGTH,
    DEFAULT_LENGTH,
)

__all__ = [
    # Backends
    "KeyValueBackend",
    "MemoryBackend",
    "SQLiteBackend",
    # Store
    "CredentialEntry",
    "CredentialStore",
    "ValidationError",
    "STORAGE_KEY",
    # Generator
    "CharClass",
    "GeneratorOptions",
    "InvalidLengthError",
    "clamp_length",
    "compose_pool",
    "generate_password",
    "parse_length",
    "MIN_LENGTH",
    "MAX_LENGTH",
    "DEFAULT_LENGTH",
]
