"""
Identifier casing helpers used by the naming rules.
"""

import re

# Anything that is not a letter or digit separates words
_SEPARATOR_PATTERN = re.compile(r"[^A-Za-z0-9]+")


def _split_chunk(chunk: str) -> list[str]:
    """Split a separator-free chunk at case boundaries.

    A new word starts at an uppercase letter that follows a lowercase letter
    or digit, and at the last capital of an acronym that is followed by a
    lowercase letter. Digits continue the current word.
    """
    words = []
    start = 0
    for i in range(1, len(chunk)):
        prev, cur = chunk[i - 1], chunk[i]
        nxt = chunk[i + 1] if i + 1 < len(chunk) else ""
        if cur.isupper() and (prev.islower() or prev.isdigit()):
            words.append(chunk[start:i])
            start = i
        elif cur.isupper() and prev.isupper() and nxt.islower():
            words.append(chunk[start:i])
            start = i
    words.append(chunk[start:])
    return words


def split_words(text: str) -> list[str]:
    """Split an identifier in any casing convention into its words.

    Examples:
        "user_id" -> ["user", "id"]
        "userId" -> ["user", "Id"]
        "HTTPServer" -> ["HTTP", "Server"]
        "api-v1" -> ["api", "v1"]
    """
    words: list[str] = []
    for chunk in _SEPARATOR_PATTERN.split(text):
        if chunk:
            words.extend(_split_chunk(chunk))
    return words


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_snake_case(text: str) -> str:
    """Convert to snake_case, e.g. "UserId" -> "user_id"."""
    return "_".join(word.lower() for word in split_words(text))


def to_shouty_snake_case(text: str) -> str:
    """Convert to SHOUTY_SNAKE_CASE, e.g. "userId" -> "USER_ID"."""
    return "_".join(word.upper() for word in split_words(text))


def to_kebab_case(text: str) -> str:
    """Convert to kebab-case, e.g. "fooBar" -> "foo-bar"."""
    return "-".join(word.lower() for word in split_words(text))


def to_lower_camel_case(text: str) -> str:
    """Convert to lowerCamelCase, e.g. "user_id" -> "userId"."""
    words = split_words(text)
    if not words:
        return ""
    return words[0].lower() + "".join(_capitalize(word) for word in words[1:])


def to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "FIRST_NAME" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"
        "ABC" -> "Abc"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    return "".join(_capitalize(word) for word in split_words(text))
