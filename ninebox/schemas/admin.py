"""Admin API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class SourceMappingRequest(BaseModel):
    """POST /v1/admin/rating-sources request."""

    axis: str
    source_type: str
    weight: float
    priority: int = 1
    is_active: bool = True
    minimum_confidence: float | None = None


class SourceMappingUpdate(BaseModel):
    """PATCH /v1/admin/rating-sources/{id} request - only provided fields change."""

    weight: float | None = None
    priority: int | None = None
    is_active: bool | None = None
    minimum_confidence: float | None = None


class SourceMappingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    axis: str
    source_type: str
    weight: float
    priority: int
    is_active: bool
    minimum_confidence: float | None


class SignalMappingRequest(BaseModel):
    """POST /v1/admin/signal-mappings request."""

    signal_code: str
    contributes_to: str = "potential"
    weight: float = 1.0
    minimum_confidence: float | None = None
    is_active: bool = True


class SignalMappingUpdate(BaseModel):
    """PATCH /v1/admin/signal-mappings/{id} request."""

    contributes_to: str | None = None
    weight: float | None = None
    minimum_confidence: float | None = None
    is_active: bool | None = None


class SignalMappingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    signal_code: str
    contributes_to: str
    weight: float
    minimum_confidence: float
    is_active: bool


class QuadrantLabelRequest(BaseModel):
    """PUT /v1/admin/quadrant-labels/{performance}/{potential} request."""

    default_label: str | None = None
    custom_label: str | None = None
    use_custom_label: bool | None = None
    description: str | None = None
    suggested_actions: list[str] | None = None
    color_code: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")


class QuadrantLabelOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    performance_level: int
    potential_level: int
    default_label: str
    custom_label: str | None
    use_custom_label: bool
    display_label: str
    description: str | None
    suggested_actions: list[str]
    color_code: str | None
