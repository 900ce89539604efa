"""
Analysis result schema.

Structured output of the vision model: one commercial title plus a tag set.

Dependencies: pydantic
System role: Contract between the analysis client and the job store
"""

from pydantic import BaseModel, Field, field_validator

# The prompt asks for exactly 47 tags; anything beyond this cap is dropped.
# Short lists are kept as they are.
MAX_STORED_TAGS = 50
TARGET_TAG_COUNT = 47
DEFAULT_TITLE = "Untitled Image"


class AnalysisResult(BaseModel):
    """Title and keywords generated for one image."""

    title: str = Field(description="Full-sentence commercial title (max 200 chars)")
    tags: list[str] = Field(
        default_factory=list,
        description="Ordered keywords, lowercase, up to 50 kept",
    )

    @field_validator("tags")
    @classmethod
    def _cap_tags(cls, value: list[str]) -> list[str]:
        return value[:MAX_STORED_TAGS]
