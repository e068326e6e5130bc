"""
Pydantic Models and Schemas
===========================

Data models exchanged with the document collaborator: the references found in a
document, the values substituted back into it, and the report of one inlining run.
"""

from typing import Optional, List
from enum import Enum

from pydantic import BaseModel, Field, field_validator


# Enums
class ResourceKind(str, Enum):
    """Kinds of external references the inliner handles."""
    IMAGE = "image"
    CSS_URL = "css_url"
    STYLESHEET = "stylesheet"


# Document references
class ImageReference(BaseModel):
    """An image element's ``src`` attribute."""
    src: str = Field(..., description="Image source, replaced by a data URI once inlined")


class StyleDeclaration(BaseModel):
    """A single CSS declaration that may contain ``url(...)`` tokens."""
    property: str = Field(..., description="CSS property name, e.g. background-image")
    value: str = Field(..., description="CSS property value")


class StylesheetLink(BaseModel):
    """A ``<link rel="stylesheet">`` reference and, once inlined, its content."""
    href: str = Field(..., description="Stylesheet location")
    content: Optional[str] = Field(None, description="Inlined stylesheet text")

    @property
    def is_inlined(self) -> bool:
        return self.content is not None


class InlineDocument(BaseModel):
    """The external references of one document, as supplied by the document collaborator."""
    base_url: str = Field("", description="Base URL every reference is resolved against")
    images: List[ImageReference] = Field(default_factory=list)
    styles: List[StyleDeclaration] = Field(default_factory=list)
    stylesheets: List[StylesheetLink] = Field(default_factory=list)


# Reports
class FetchFailure(BaseModel):
    """A reference that could not be fetched and was left untouched."""
    url: str = Field(..., description="Resolved URL that failed")
    reason: str = Field(..., description="Failure reason reported by the fetcher")
    kind: ResourceKind

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str) -> str:
        """Never keep an empty reason."""
        return v or "unknown error"


class InlineReport(BaseModel):
    """Outcome of one or more inlining passes."""
    inlined: int = Field(0, ge=0, description="References replaced by their content")
    skipped: int = Field(0, ge=0, description="References that were already inline")
    failures: List[FetchFailure] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    def merge(self, other: "InlineReport") -> "InlineReport":
        """Combine two reports into a new one."""
        return InlineReport(
            inlined=self.inlined + other.inlined,
            skipped=self.skipped + other.skipped,
            failures=self.failures + other.failures,
        )
