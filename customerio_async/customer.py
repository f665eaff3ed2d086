"""Customer profiles on the Tracking API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

_PLATFORMS = ("ios", "android")


class Customer(BaseModel):
    """A person identified to Customer.io by ``id``.

    ``attributes`` holds any custom profile attributes; ``email`` and
    ``created_at`` are sent alongside them on :meth:`set_attributes`.
    """

    model_config = ConfigDict(extra="forbid")

    api_client: Any = Field(exclude=True, repr=False)
    id: int | str
    email: str | None = None
    created_at: int | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    @property
    def resource_path(self) -> str:
        return f"customers/{self.id}"

    async def set_attributes(self) -> Any:
        """Create the customer, or update the attributes of an existing one."""
        body: dict[str, Any] = dict(self.attributes)
        if self.email is not None:
            body["email"] = self.email
        if self.created_at is not None:
            body["created_at"] = self.created_at
        return await self.api_client.tracking_request("PUT", self.resource_path, body)

    async def remove(self) -> Any:
        return await self.api_client.tracking_request("DELETE", self.resource_path)

    async def emit_event(self, name: str, data: dict[str, Any] | None = None) -> Any:
        if not name:
            raise ValueError("Missing required attribute: name")
        body: dict[str, Any] = {"name": name}
        if data is not None:
            body["data"] = data
        return await self.api_client.tracking_request("POST", f"{self.resource_path}/events", body)

    async def add_device(
        self,
        device_id: str,
        platform: Literal["ios", "android"],
        last_used: int | None = None,
    ) -> Any:
        """Register or update a push device for this customer."""
        if not device_id:
            raise ValueError("Missing required attribute: device_id")
        if platform not in _PLATFORMS:
            raise ValueError(f"Invalid platform {platform!r}, expected one of {_PLATFORMS}")
        device: dict[str, Any] = {"id": device_id, "platform": platform}
        if last_used is not None:
            device["last_used"] = last_used
        return await self.api_client.tracking_request(
            "PUT", f"{self.resource_path}/devices", {"device": device},
        )

    async def delete_device(self, device_id: str) -> Any:
        if not device_id:
            raise ValueError("Missing required attribute: device_id")
        return await self.api_client.tracking_request(
            "DELETE", f"{self.resource_path}/devices/{device_id}",
        )

    async def suppress(self) -> Any:
        """Delete the customer and stop them from being re-added."""
        return await self.api_client.tracking_request("POST", f"{self.resource_path}/suppress")

    async def unsuppress(self) -> Any:
        return await self.api_client.tracking_request("POST", f"{self.resource_path}/unsuppress")
