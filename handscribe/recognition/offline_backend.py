"""Offline recognition backend returning canned documents."""

import asyncio
import logging
import random
from typing import Optional

from .base import AbstractRecognitionBackend
from ..models.image import ImageSource

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 1.5

CANNED_DOCUMENTS = (
    "INVOICE\n\nInvoice #: INV-2023-0042\nDate: June 15, 2023\n\nBill To:\n"
    "Acme Corporation\n123 Business Ave\nCorporate Park, CA 94107\n\n"
    "Description | Quantity | Rate | Amount\n--------------------------------\n"
    "Consulting Services | 40 | $150 | $6,000\nSoftware License | 1 | $2,500 | $2,500\n\n"
    "Subtotal: $8,500\nTax (8.5%): $722.50\nTotal Due: $9,222.50",

    "MEETING MINUTES\n\nProject: Website Redesign\nDate: March 10, 2023\n"
    "Attendees: John Smith, Sarah Johnson, Michael Wong\n\nKey Discussion Points:\n"
    "1. Timeline review - project on track for May launch\n"
    "2. Budget approval for additional design resources\n"
    "3. Content migration strategy finalized\n\nAction Items:\n"
    "- John: Prepare design mockups by 3/17\n- Sarah: Schedule user testing sessions\n"
    "- Michael: Update stakeholders on progress",

    "RECEIPT\n\nGreen Grocery Market\n456 Fresh Street\nHealthytown, NY 10001\n\n"
    "Date: 04/22/2023\nTime: 14:32\n\nOrganic Apples (1lb) - $3.99\n"
    "Whole Grain Bread - $4.50\nFarm Fresh Eggs (dozen) - $5.99\n"
    "Almond Milk (32oz) - $3.49\n\nSubtotal: $17.97\nTax: $1.44\nTotal: $19.41\n\n"
    "Thank you for shopping with us!",

    "BUSINESS CARD\n\nJane Doe, MBA\nSenior Marketing Director\n\nTech Innovations Inc.\n\n"
    "Phone: (555) 123-4567\nEmail: jane.doe@techinnovations.com\n"
    "www.techinnovations.com\n\n100 Enterprise Way, Suite 300\nSilicon Valley, CA 94025",
)


class OfflineRecognitionBackend(AbstractRecognitionBackend):
    """Demo backend used when no network-capable image pipeline is available."""

    service_name = "offline"

    def __init__(self,
                 delay_seconds: float = DEFAULT_DELAY_SECONDS,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        """Initialize offline backend.

        Args:
            delay_seconds: Simulated service latency
            seed: Seed for document selection, for reproducible runs
            rng: Explicit random generator (takes precedence over seed)
        """
        self.delay_seconds = delay_seconds
        self._rng = rng or random.Random(seed)

        logger.info(f"OfflineRecognitionBackend initialized (delay={delay_seconds}s, seed={seed})")

    async def recognize_offline(self) -> str:
        """Simulate a recognition and return one canned document."""
        await asyncio.sleep(self.delay_seconds)
        text = self._rng.choice(CANNED_DOCUMENTS)
        logger.debug(f"Offline recognition picked: {text.splitlines()[0]}")
        return text

    async def transcribe(self, image: Optional[ImageSource]) -> str:
        return await self.recognize_offline()
