"""Positional template rendering for webhook bodies and headers.

Placeholders look like ``${0}``, ``${1}``... and index into a capture-group
set. Substitution is plain sequential string replacement in increasing
index order. Values are not escaped, and a value that itself contains
``${i}``-shaped text will be substituted again by a later pass.
"""

from typing import Sequence


def placeholder(index: int) -> str:
    """Placeholder token for a zero-based index."""
    return "${" + str(index) + "}"


def render_template(template: str, values: Sequence[str]) -> str:
    """Replace each ``${i}`` in template with values[i].

    Placeholders without a matching value are left as-is.
    """
    rendered = template
    for idx, value in enumerate(values):
        rendered = rendered.replace(placeholder(idx), value)
    return rendered


def render_headers(headers: dict[str, str], values: Sequence[str]) -> dict[str, str]:
    """Render every header value template; header names are static."""
    return {name: render_template(tmpl, values) for name, tmpl in headers.items()}
