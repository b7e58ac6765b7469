from __future__ import annotations

from abc import ABC, abstractmethod

from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.step_definition import StepDefinition


class CatalogSourcePort(ABC):
    @abstractmethod
    def load_products(self) -> list[Product]:
        """Return the catalog in authored order."""
        raise NotImplementedError

    @abstractmethod
    def load_steps(self) -> list[StepDefinition]:
        """Return the wizard steps in authored order."""
        raise NotImplementedError
