from pydantic import BaseModel, Field


class TransformPosition(BaseModel):
    x: float = 0.0  # px offset from centre
    y: float = 0.0


class CropRect(BaseModel):
    """Pixels removed from each edge of the source frame."""
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


class Transform(BaseModel):
    clip_id: str
    scale: float = 1.0
    rotation: float = 0.0  # degrees
    position: TransformPosition = Field(default_factory=TransformPosition)
    crop: CropRect = Field(default_factory=CropRect)
    flip_h: bool = False
    flip_v: bool = False
    lock_aspect_ratio: bool = True
