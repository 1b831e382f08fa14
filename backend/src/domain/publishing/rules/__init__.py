"""Publishing rule sets.

Each rule module contains rule group functions with the signature
(acc, record, ctx) that add findings to the pass accumulator, plus the
field validators they are built from.
"""

from . import chapter_rules, publication_rules, rights_rules, sales_rules
from .common import check_keywords, check_required_fields, check_title, require_mapping

__all__ = [
    "chapter_rules",
    "publication_rules",
    "rights_rules",
    "sales_rules",
    "check_keywords",
    "check_required_fields",
    "check_title",
    "require_mapping",
]
