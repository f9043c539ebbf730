"""
Luidhub credit balance, ledger and purchase packages.
"""

from typing import List, Optional

from .base import ApiDateTime, PaginationInfo, SnakeModel


class CreditBalance(SnakeModel):
    """Balance split by credit source."""

    total_credits: int = 0
    subscription_credits: int = 0
    purchased_credits: int = 0
    promotional_credits: int = 0
    plan: str = "free"
    period_start: Optional[ApiDateTime] = None
    period_end: Optional[ApiDateTime] = None
    next_reset: Optional[ApiDateTime] = None


class CreditTransactionMetadata(SnakeModel):
    model_id: Optional[str] = None
    model_name: Optional[str] = None
    generation_id: Optional[str] = None
    request_id: Optional[str] = None


class CreditTransaction(SnakeModel):
    """Ledger entry; `type` is one of deduct, add, purchase or subscription."""

    id: str
    type: str
    amount: int
    balance_before: int
    balance_after: int
    description: Optional[str] = None
    metadata: Optional[CreditTransactionMetadata] = None
    created_at: ApiDateTime


class CreditPackage(SnakeModel):
    id: str
    name: str
    credits: int
    price: float
    popular: bool = False
    savings: Optional[int] = None

    @property
    def price_formatted(self) -> str:
        return f"${self.price:.2f}"

    @property
    def credits_per_dollar(self) -> float:
        if self.price <= 0:
            return 0.0
        return self.credits / self.price


class CreditTransactionsPage(SnakeModel):
    success: bool = True
    data: List[CreditTransaction]
    pagination: Optional[PaginationInfo] = None


class CheckoutSession(SnakeModel):
    url: str
