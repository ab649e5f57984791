"""Utility functions for the stream_video service."""

import dataclasses
import os
import typing
from typing import Any
from typing import Callable
from typing import TypeVar


T = TypeVar("T")


def env(key: str, convert: Callable[[str], T] = typing.cast(Callable[[str], T], str), **kwargs: Any) -> T:
    """Load a value from environment variables with optional default and type conversion."""
    key, partition, default = key.partition(":")

    def default_factory(
        key_val: str = key, default_val: str = default, convert_func: Callable[[str], T] = convert
    ) -> T:
        if key_val in os.environ:
            return convert_func(os.environ[key_val])

        if partition == ":":
            return convert_func(default_val)

        raise KeyError(key_val)

    return typing.cast(T, dataclasses.field(default_factory=default_factory, **kwargs))


def parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


def parse_csv_set(value: str) -> frozenset[str]:
    """Split a comma separated env value into a set of trimmed, non-empty tokens."""
    return frozenset(item.strip() for item in value.split(",") if item.strip())
