"""Builders for the case-insensitive pattern filters sent to the document store."""

import re

# Characters with a special meaning in both PCRE (MongoDB) and Python regexes
_REGEX_SPECIALS = re.compile(r"[.*+?^${}()|\[\]\\]")


def escape_pattern(query: str) -> str:
    """Escape regex metacharacters so the query is matched as a literal substring."""
    return _REGEX_SPECIALS.sub(r"\\\g<0>", query.strip())


def compile_pattern(query: str) -> re.Pattern:
    """Compile the escaped query into a case-insensitive Python pattern."""
    return re.compile(escape_pattern(query), re.IGNORECASE)


def build_regex_filter(query: str, fields: tuple[str, ...]) -> dict:
    """Build a MongoDB filter matching the query in any of the given fields.

    Array fields (categories, keywords) match when any element matches.

    Args:
        query (str): The raw user query.
        fields (tuple[str, ...]): Document fields to match against.

    Returns:
        dict: ``{"$or": [{field: {"$regex": ..., "$options": "i"}}, ...]}``
    """
    pattern = escape_pattern(query)
    return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in fields]}


def build_membership_filter(values: list[str], fields: tuple[str, ...]) -> dict:
    """Build a MongoDB filter matching documents whose array fields contain any of the values exactly."""
    return {"$or": [{field: {"$in": list(values)}} for field in fields]}
