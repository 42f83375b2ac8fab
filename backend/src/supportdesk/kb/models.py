"""Knowledge-base data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from supportdesk.ranking.tokenizer import tokenize


class FaqCategory(str, Enum):
    """Fixed set of FAQ categories."""

    ORDERS = "Orders"
    PAYMENTS = "Payments"
    RETURNS_REFUNDS = "Returns & Refunds"
    CANCELLATIONS = "Cancellations"
    MEMBERSHIP = "Membership / Prime"
    DELIVERY = "Delivery"
    WARRANTY_REPAIRS = "Warranty & Repairs"
    GIFT_CARDS_COUPONS = "Gift Cards & Coupons"
    ACCOUNT_SECURITY = "Account & Security"
    INTERNATIONAL_SHIPPING = "International Shipping"

    @property
    def icon(self) -> str:
        """Font Awesome icon class shown next to the category."""
        return CATEGORY_ICONS[self]


CATEGORY_ICONS: dict[FaqCategory, str] = {
    FaqCategory.ORDERS: "fas fa-shopping-cart",
    FaqCategory.PAYMENTS: "fas fa-credit-card",
    FaqCategory.RETURNS_REFUNDS: "fas fa-undo",
    FaqCategory.CANCELLATIONS: "fas fa-times-circle",
    FaqCategory.MEMBERSHIP: "fas fa-crown",
    FaqCategory.DELIVERY: "fas fa-truck",
    FaqCategory.WARRANTY_REPAIRS: "fas fa-shield-alt",
    FaqCategory.GIFT_CARDS_COUPONS: "fas fa-gift",
    FaqCategory.ACCOUNT_SECURITY: "fas fa-user-shield",
    FaqCategory.INTERNATIONAL_SHIPPING: "fas fa-globe",
}


@dataclass
class FaqEntry:
    """A single question/answer record of the knowledge base.

    Attributes:
        id: Stable unique identifier (e.g. "faq_12").
        question: Question text as shown to customers.
        answer: Answer text returned verbatim on a direct match.
        category: Category the entry is listed under.
        keywords: Normalized tokens matched alongside the question. Derived
            from the question when the dataset does not supply any.
        usage_count: How many times the entry has been served.
        embedding: Cached pseudo-embedding of question and answer, filled on
            first use by the hybrid scorer.
    """

    id: str
    question: str
    answer: str
    category: FaqCategory
    keywords: list[str] = field(default_factory=list)
    usage_count: int = 0
    embedding: tuple[float, ...] | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.usage_count < 0:
            raise ValueError(f"usage_count must be non-negative, got {self.usage_count}")
        if self.keywords:
            self.keywords = [word for keyword in self.keywords for word in tokenize(keyword)]
        else:
            self.keywords = tokenize(self.question)
