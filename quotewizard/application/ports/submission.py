from __future__ import annotations

from abc import ABC, abstractmethod

from quotewizard.domain.entities.submission import DraftOrderRequest, SubmissionReceipt


class SubmissionPort(ABC):
    @abstractmethod
    def create_draft_order(self, request: DraftOrderRequest) -> SubmissionReceipt:
        """Create a draft order. Returns the confirmation reference."""
        raise NotImplementedError
