"""
Path utilities for building REST endpoint paths.
"""

from typing import Union


def join_path(*segments: Union[str, int]) -> str:
    """
    Join endpoint path segments with single separators.

    Empty segments are dropped, so an optional trailing symbol collapses
    cleanly: join_path("orders", "") == "orders" and
    join_path("orders", "", "hist") == "orders/hist".

    Args:
        segments: Path segments. Leading/trailing slashes are stripped.

    Returns:
        Relative path without leading, trailing or doubled separators.
    """
    parts = []
    for segment in segments:
        text = str(segment).strip("/")
        if text:
            parts.append(text)
    return "/".join(parts)
