"""Identifier formatting for generated function names."""


def capitalize(name: str | None) -> str:
    """Upper-case the first character of *name*, leaving the rest unchanged.

    Example:
        >>> capitalize("userProfile")
        'UserProfile'
        >>> capitalize("")
        ''
    """
    if not name:
        return ""

    return name[0].upper() + name[1:]
