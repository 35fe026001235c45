from __future__ import annotations

from ..ports import ClipboardPort

"""Copy-paste template for building a guest list in a spreadsheet tool.

Fixed content: one header row and three example rows, nine tab-separated columns.
"""

__all__ = [
    "GUEST_TEMPLATE_TSV",
    "TEMPLATE_HEADERS",
    "copy_template",
]

TEMPLATE_HEADERS = (
    "Household Name",
    "Name",
    "Main Contact",
    "Email",
    "Phone",
    "Address",
    "Side",
    "Plus One",
    "Dietary Restrictions",
)

_TEMPLATE_ROWS = (
    TEMPLATE_HEADERS,
    ("Sharma Family", "Priya Sharma", "Yes", "priya@email.com", "555-123-4567",
     "12 Lotus Lane, Edison NJ", "bride", "yes", "vegetarian"),
    ("Sharma Family", "Raj Sharma", "No", "", "", "12 Lotus Lane, Edison NJ", "bride", "no", ""),
    ("Patel Family", "Rahul Patel", "Yes", "rahul@email.com", "555-987-6543",
     "48 Banyan Court, Iselin NJ", "groom", "no", ""),
)

GUEST_TEMPLATE_TSV = "\n".join("\t".join(row) for row in _TEMPLATE_ROWS)


def copy_template(clipboard: ClipboardPort) -> str:
    clipboard.write_text(GUEST_TEMPLATE_TSV)
    return GUEST_TEMPLATE_TSV
