from dataclasses import dataclass


@dataclass(frozen=True)
class Forecast:
    """Title and body for one sign. ``None`` marks a field that was not extracted."""

    title: str | None = None
    body: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.title is not None and self.body is not None
