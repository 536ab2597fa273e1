"""Canvas request schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CanvasCreate(BaseModel):
    """New canvas page."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(default="", description="HTML or Markdown body")
    is_public: bool = Field(default=True)
    room_id: str | None = Field(default=None, description="Attach to a room")


class CanvasUpdate(BaseModel):
    """Edit of an existing canvas. Fields left as None are not touched."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None)
    is_public: bool | None = Field(default=None)

    def to_patch(self) -> dict[str, str | int]:
        patch: dict[str, str | int] = self.model_dump(exclude_none=True)
        if "is_public" in patch:
            patch["is_public"] = int(patch["is_public"])
        return patch
