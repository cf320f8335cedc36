#!/usr/bin/env python3
"""
Error taxonomy for the orrery.

- RegistryInvalidError: the static body catalog is malformed; fatal at startup.
- UnknownBodyError: a caller referenced a body id that does not exist; recoverable.
- ParameterRangeError: a parameter edit was rejected; recoverable, store unchanged.
- HierarchyResolutionError: a moon's parent was missing from a frame; programmer error.
"""
from typing import Any, Optional


class OrreryError(Exception):
    """Base class for all orrery errors."""


class RegistryInvalidError(OrreryError):
    pass


class UnknownBodyError(OrreryError, KeyError):
    def __init__(self, body_id: str):
        super().__init__(body_id)
        self.body_id = body_id

    def __str__(self) -> str:
        return f"unknown body id: {self.body_id!r}"


class ParameterRangeError(OrreryError, ValueError):
    def __init__(self, body_id: str, field: str, value: Any, reason: Optional[str] = None):
        self.body_id = body_id
        self.field = field
        self.value = value
        self.reason = reason or "out of range"
        super().__init__(f"{body_id}.{field} = {value!r} rejected: {self.reason}")


class HierarchyResolutionError(OrreryError):
    pass
