"""Target selector derivation.

A request names its target either by element id or by a raw CSS selector.
Ids are turned into ``#id`` selectors with CSS identifier escaping so ids
containing punctuation (``a.b``, ``x:y``) still match exactly one element.
"""

import re

# Space plus every ASCII punctuation character that is special in a selector.
_CSS_SPECIAL = re.compile(r"""([ !"#$%&'()*+,./:;<=>?@\[\\\]^`{|}~])""")


def escape_css_id(element_id: str) -> str:
    """Backslash-escape characters that would break an id selector.

    Args:
        element_id: The raw element id.

    Returns:
        The id with each special character prefixed by a backslash.

    Example:
        >>> escape_css_id("a.b")
        'a\\\\.b'
    """
    return _CSS_SPECIAL.sub(r"\\\1", str(element_id))


def build_selector(button_id: str | None, selector: str | None) -> str:
    """Derive the CSS selector to wait for and click.

    A raw selector takes precedence over an element id.

    Raises:
        ValueError: If neither is given.
    """
    if selector:
        return str(selector)
    if button_id:
        return f"#{escape_css_id(button_id)}"
    raise ValueError("Provide buttonId or selector")
