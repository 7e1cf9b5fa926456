"""Base models for branchsweep."""

from pydantic import BaseModel, ConfigDict


class SweepBaseModel(BaseModel):
    """Base model for locally constructed entities (requests, outcomes, config)."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",  # Strict validation for request payloads
    )


class RemoteModel(BaseModel):
    """Base model for entities parsed from the remote hosting API.

    Unknown fields are dropped since upstream payloads carry far more than we use.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )
