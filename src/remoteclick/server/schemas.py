"""Pydantic wrappers for inbound HTTP payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RunPayload(BaseModel):
    """Body of ``POST /run``.

    Durations and the click flag are accepted loosely here (numbers or
    numeric strings); RequestDescriptor does the real validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str | None = None
    button_id: str | None = Field(default=None, alias="buttonId")
    selector: str | None = None
    frame_url_contains: str | None = Field(default=None, alias="frameUrlContains")
    wait_ms: int | str | None = Field(default=None, alias="waitMs")
    wait_for_selector_ms: int | str | None = Field(
        default=None, alias="waitForSelectorMs"
    )
    extra_wait_after_load_ms: int | str | None = Field(
        default=None, alias="extraWaitAfterLoadMs"
    )
    use_js_click: bool | str | None = Field(default=None, alias="useJsClick")

    def to_mapping(self) -> dict[str, Any]:
        """Return the camelCase mapping RequestDescriptor.from_mapping expects."""
        return self.model_dump(by_alias=True, exclude_none=True)
