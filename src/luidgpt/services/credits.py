"""
Credit service backed by Luidhub.

Balances, the credit ledger and purchasable packages live on the separate
Luidhub service, which shares the backend's bearer token.
"""

from typing import List, Optional, Tuple
import logging

from ..core.client import ServerError
from ..models import (
    CheckoutSession,
    CreditBalance,
    CreditPackage,
    CreditTransaction,
    CreditTransactionsPage,
    Envelope,
    PaginationInfo,
)
from .base import BaseService, unwrap

logger = logging.getLogger(__name__)

DEFAULT_LOW_CREDITS_THRESHOLD = 10


class CreditService(BaseService):
    """Balance, history and checkout against ``/api/credits``."""

    async def get_balance(self) -> CreditBalance:
        logger.debug("Fetching credit balance from Luidhub")
        envelope = await self.client.get("/api/credits/balance", response_model=Envelope[CreditBalance])
        balance = unwrap(envelope, "Failed to fetch credit balance")
        logger.debug(f"Credit balance: {balance.total_credits} total credits")
        return balance

    async def get_transactions(
        self,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[CreditTransaction], Optional[PaginationInfo]]:
        result = await self.client.get(
            "/api/credits/transactions",
            {"page": page, "limit": limit},
            response_model=CreditTransactionsPage,
        )
        if not result.success:
            raise ServerError("Failed to fetch credit transactions")
        return result.data, result.pagination

    async def get_packages(self) -> List[CreditPackage]:
        envelope = await self.client.get("/api/credits/packages", response_model=Envelope[List[CreditPackage]])
        return unwrap(envelope, "Failed to fetch credit packages")

    async def create_checkout_session(self, package_id: str) -> str:
        """Start a checkout for a package and return the payment page URL."""
        logger.info(f"Creating checkout session for package: {package_id}")
        session = await self.client.post(
            "/api/credits/purchase", {"packageId": package_id}, response_model=CheckoutSession,
        )
        return session.url

    @staticmethod
    def has_sufficient_credits(balance: CreditBalance, required: int) -> bool:
        return balance.total_credits >= required

    @staticmethod
    def is_low(balance: CreditBalance, threshold: int = DEFAULT_LOW_CREDITS_THRESHOLD) -> bool:
        return balance.total_credits < threshold
