"""Cleanup of compiler cross-reference identifiers."""

# Kind markers for types, methods, properties and fields
_KIND_MARKERS = ("T:", "M:", "P:", "F:")


def clean_cref(cref: str) -> str:
    """Remove symbol-kind markers from a cref string.

    Markers are removed wherever they occur, not only as a prefix.

    Args:
        cref: A documentation ID such as 'M:Demo.Calculator.Add'.

    Returns:
        The identifier without markers, e.g. 'Demo.Calculator.Add'.
    """
    for marker in _KIND_MARKERS:
        cref = cref.replace(marker, "")
    return cref
