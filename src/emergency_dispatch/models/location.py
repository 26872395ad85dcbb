from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """Where an incident happened. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(default=0.0, ge=-90.0, le=90.0)
    longitude: float = Field(default=0.0, ge=-180.0, le=180.0)
    address: str = "Unknown"

    def __str__(self) -> str:
        return f"Location: {self.address} ({self.latitude}, {self.longitude})"

    def template_context(self) -> dict[str, object]:
        return {
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
