"""
Utility functions for the Nova interpreter: host recursion headroom for the
recursive parser and evaluator, arbitrary-size integer text conversion, and a
JSON serializer for pipeline artifacts.
"""

import json
import sys
from contextlib import contextmanager

from pydantic import BaseModel

# Frames reserved for the caller (test runners, embedding applications) on top
# of what the interpreter itself needs.
CALLER_FRAME_ALLOWANCE = 1000


@contextmanager
def recursion_headroom(frames: int):
    """
    Temporarily raises the host recursion limit so that `frames` additional
    frames fit on top of the caller. The previous limit is always restored.
    """
    previous = sys.getrecursionlimit()
    required = frames + CALLER_FRAME_ALLOWANCE
    if required > previous:
        sys.setrecursionlimit(required)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


@contextmanager
def unbounded_int_digits():
    """
    Lifts the host's cap on int <-> decimal text conversion (Python 3.11+)
    for the duration of the block. Nova integers are arbitrary precision, so
    reading and displaying them must not depend on the number of digits.
    """
    get_limit = getattr(sys, "get_int_max_str_digits", None)
    if get_limit is None:
        yield
        return
    previous = get_limit()
    sys.set_int_max_str_digits(0)
    try:
        yield
    finally:
        sys.set_int_max_str_digits(previous)


def int_to_text(value: int) -> str:
    with unbounded_int_digits():
        return str(value)


def text_to_int(text: str) -> int:
    with unbounded_int_digits():
        return int(text)


class ArtifactEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        return super().default(o)
