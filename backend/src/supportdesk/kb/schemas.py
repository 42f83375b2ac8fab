"""Knowledge-base API schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FaqQuestion(CamelModel):
    """Question shown in FAQ listings."""

    id: str
    question: str
    answer: str


class FaqCategorySummary(CamelModel):
    """A category with its entry count and leading questions."""

    name: str
    icon: str
    count: int = Field(..., ge=0)
    questions: list[FaqQuestion] = Field(default_factory=list)


class KnowledgeBaseStats(CamelModel):
    """Aggregate knowledge-base statistics."""

    total_entries: int = Field(..., ge=0)
    categories_count: int = Field(..., ge=0)
    total_usage: int = Field(..., ge=0)
    avg_usage: int = Field(..., ge=0, description="Mean usage per entry, rounded")
    top_category: str = Field("", description="Category with the most entries")


class FaqMatch(CamelModel):
    """An FAQ entry returned by a search, with its similarity score."""

    id: str
    question: str
    answer: str
    category: str
    score: float = Field(..., ge=0.0)
