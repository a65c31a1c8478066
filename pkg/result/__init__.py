"""
Result package.
"""
from .result import (
    Failure,
    Result,
    Success,
    UnwrapFailedError,
    combine,
    fail,
    ok,
)

__all__ = [
    "Result",
    "Success",
    "Failure",
    "UnwrapFailedError",
    "ok",
    "fail",
    "combine",
]
