from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from intent_gateway.services.secrets import CredentialSource


class HealthStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    port: int
    key_source: CredentialSource = Field(..., alias="keySource")
