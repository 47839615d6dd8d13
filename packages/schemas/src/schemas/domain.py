"""Resolved domain model."""

from pydantic import BaseModel, Field, ConfigDict


class ResolvedDomain(BaseModel):
    """Registrable domain computed for one input URL."""

    url: str = Field(..., description="Input URL as given by the caller")
    registrable_domain: str = Field(
        ...,
        description="eTLD+1 of the URL's host, the host itself for IP literals, "
        "or an empty string when not applicable",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://www.example.co.uk/path",
                "registrable_domain": "example.co.uk",
            }
        }
    )
