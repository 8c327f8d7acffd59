"""PII findings detected locally from resume text."""

from typing import List

from pydantic import Field

from .base import CamelModel


class PIIFindings(CamelModel):
    """Order-preserving, first-seen de-duplicated PII matches per category."""

    emails: List[str] = Field(default_factory=list)
    phones: List[str] = Field(default_factory=list)
    addresses: List[str] = Field(default_factory=list)
    social_media: List[str] = Field(default_factory=list)

    @property
    def categories_found(self) -> List[str]:
        return [name for name in ("emails", "phones", "addresses", "social_media") if getattr(self, name)]
