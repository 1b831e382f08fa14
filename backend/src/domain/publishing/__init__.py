"""Publishing record validators.

One validator per record kind (chapter, publication, rights grant, sales
transaction), each exposing lifecycle entry points that return a
ValidationResult.
"""

from .base import PublishingRecordValidator
from .chapter_validator import ChapterValidator
from .publication_validator import PublicationValidator
from .rights_validator import RightsValidator
from .sales_validator import SalesValidator

__all__ = [
    "PublishingRecordValidator",
    "ChapterValidator",
    "PublicationValidator",
    "RightsValidator",
    "SalesValidator",
]
