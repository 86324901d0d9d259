# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration sources feeding the layered loader."""

from __future__ import annotations

from .sources import (
    ConfigSource,
    DefaultConfigSource,
    PyProjectConfigSource,
    TomlConfigSource,
    deep_merge,
    expand_env,
)

__all__ = [
    "ConfigSource",
    "DefaultConfigSource",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "deep_merge",
    "expand_env",
]
