"""API-triggered broadcasts on the Regular API."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

# Fields sent in the body of an activation request.
_ACTIVATION_FIELDS = ("data", "recipients", "ids", "emails", "per_user_data", "data_file_url")


class Trigger(BaseModel):
    """One trigger of an API-triggered broadcast campaign.

    A trigger has no ``id`` until :meth:`activate` succeeds (or it was
    loaded with :meth:`find`).
    """

    model_config = ConfigDict(extra="ignore")

    api_client: Any = Field(exclude=True, repr=False)
    campaign_id: int | str
    id: int | str | None = None
    data: dict[str, Any] | None = None
    recipients: dict[str, Any] | None = None
    ids: list[str] | None = None
    emails: list[str] | None = None
    per_user_data: list[dict[str, Any]] | None = None
    data_file_url: str | None = None
    processed: bool | None = None

    @property
    def resource_path(self) -> str:
        if self.id is None:
            raise ValueError("Trigger has not been activated")
        return f"campaigns/{self.campaign_id}/triggers/{self.id}"

    async def activate(self) -> int | str:
        """Trigger the broadcast and remember the id Customer.io assigns."""
        if self.id is not None:
            raise ValueError(f"Trigger {self.id} is already activated")
        body = {
            name: getattr(self, name)
            for name in _ACTIVATION_FIELDS
            if getattr(self, name) is not None
        }
        response = await self.api_client.api_request(
            "POST", f"campaigns/{self.campaign_id}/triggers", body,
        )
        self.id = response["id"]
        return self.id

    async def status(self) -> Any:
        return await self.api_client.api_request("GET", self.resource_path)

    async def get_errors(self, start: str | None = None, limit: int | None = None) -> Any:
        """Return the per-recipient errors recorded for this trigger.

        *start* is the pagination cursor returned by a previous call.
        """
        params = {
            k: v for k, v in (("start", start), ("limit", limit)) if v is not None
        }
        path = f"{self.resource_path}/errors"
        if params:
            path += f"?{httpx.QueryParams(params)}"
        return await self.api_client.api_request("GET", path)

    @classmethod
    async def find(
        cls, api_client: Any, campaign_id: int | str, trigger_id: int | str,
    ) -> Trigger:
        """Load an existing trigger from the API."""
        response = await api_client.api_request(
            "GET", f"campaigns/{campaign_id}/triggers/{trigger_id}",
        )
        fields = response.get("trigger", response) if isinstance(response, dict) else {}
        return cls.model_validate(
            {**fields, "api_client": api_client, "campaign_id": campaign_id, "id": trigger_id}
        )
