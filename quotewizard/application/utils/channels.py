from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChannelPolicy:
    """Which fulfilment channel an order goes to."""

    default: str
    secondary: str
    secondary_region: str
    forced: str | None = None

    def normalise(self, channel: str | None) -> str:
        return self.secondary if channel == self.secondary else self.default

    def for_region(self, region: str | None) -> str:
        if self.forced:
            return self.normalise(self.forced)
        if region and region.strip().upper() == self.secondary_region.upper():
            return self.secondary
        return self.default

    def initial(self, region: str | None, persisted: str | None) -> str:
        if self.forced:
            return self.normalise(self.forced)
        if region and region.strip().upper() == self.secondary_region.upper():
            return self.secondary
        return self.normalise(persisted)
