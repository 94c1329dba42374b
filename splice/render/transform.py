"""
Clip transform: scale, rotation, position, crop and flips.

Crop is expressed in source pixels removed from each edge; position is a
pixel offset of the clip centre from the frame centre.
"""

import logging
import math

from splice.render.filters import Expr, FilterExpr
from splice.schemas.transform import CropRect, Transform

logger = logging.getLogger(__name__)

MIN_SCALE = 0.1
MAX_SCALE = 3.0


def create_default_transform(clip_id: str) -> Transform:
    return Transform(clip_id=clip_id)


def clamp_scale(scale: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, scale))


def normalize_rotation(rotation: float) -> float:
    """Wrap degrees into [0, 360)."""
    normalized = rotation % 360
    return 0.0 if normalized == 360 else normalized


def clamp_crop(crop: CropRect, width: float, height: float) -> CropRect:
    """Keep every edge non-negative and leave at least one pixel on each axis."""
    top = max(0.0, crop.top)
    right = max(0.0, crop.right)
    bottom = max(0.0, crop.bottom)
    left = max(0.0, crop.left)

    max_x = max(0.0, width - 1)
    if left + right > max_x:
        left = min(left, max_x)
        right = max_x - left
    max_y = max(0.0, height - 1)
    if top + bottom > max_y:
        top = min(top, max_y)
        bottom = max_y - top

    return CropRect(top=top, right=right, bottom=bottom, left=left)


def validate_transform(transform: Transform, width: float, height: float) -> list[str]:
    errors: list[str] = []
    if not MIN_SCALE <= transform.scale <= MAX_SCALE:
        errors.append(f"Scale must be between {MIN_SCALE:g} and {MAX_SCALE:g}")

    crop = transform.crop
    if min(crop.top, crop.right, crop.bottom, crop.left) < 0:
        errors.append("Crop values cannot be negative")
    if crop.left + crop.right >= width:
        errors.append("Horizontal crop removes the whole frame")
    if crop.top + crop.bottom >= height:
        errors.append("Vertical crop removes the whole frame")
    return errors


def _has_crop(crop: CropRect) -> bool:
    return crop.top > 0 or crop.right > 0 or crop.bottom > 0 or crop.left > 0


def _crop_size(base: str, *edges: float) -> Expr:
    """Input dimension minus the removed edges, e.g. ``iw-10-20``."""
    return Expr(base + "".join(f"-{edge:g}" for edge in edges if edge > 0))


def _crop_expr(
    crop: CropRect,
    source_width: float | None,
    source_height: float | None,
) -> FilterExpr:
    if source_width is not None and source_height is not None:
        crop = clamp_crop(crop, source_width, source_height)
        width: float | Expr = source_width - crop.left - crop.right
        height: float | Expr = source_height - crop.top - crop.bottom
    else:
        crop = CropRect(
            top=max(0.0, crop.top),
            right=max(0.0, crop.right),
            bottom=max(0.0, crop.bottom),
            left=max(0.0, crop.left),
        )
        width = _crop_size("iw", crop.left, crop.right)
        height = _crop_size("ih", crop.top, crop.bottom)
    return FilterExpr("crop").arg("w", width).arg("h", height).arg("x", crop.left).arg("y", crop.top)


def build_transform_exprs(
    transform: Transform,
    source_width: float | None = None,
    source_height: float | None = None,
) -> list[FilterExpr]:
    exprs: list[FilterExpr] = []

    if _has_crop(transform.crop):
        exprs.append(_crop_expr(transform.crop, source_width, source_height))

    scale = clamp_scale(transform.scale)
    if scale != 1:
        exprs.append(FilterExpr("scale").arg("w", Expr(f"iw*{scale:g}")).arg("h", Expr(f"ih*{scale:g}")))

    rotation = normalize_rotation(transform.rotation)
    if rotation != 0:
        # hypot() output size keeps the rotated corners in frame
        exprs.append(
            FilterExpr("rotate")
            .arg("angle", math.radians(rotation))
            .arg("ow", Expr("hypot(iw,ih)"))
            .arg("oh", Expr("hypot(iw,ih)"))
            .arg("fillcolor", "none")
        )

    if transform.flip_h:
        exprs.append(FilterExpr("hflip"))
    if transform.flip_v:
        exprs.append(FilterExpr("vflip"))

    return exprs


def build_transform_filters(
    transform: Transform,
    source_width: float | None = None,
    source_height: float | None = None,
) -> list[str]:
    """
    Compile a transform to filter stages in the order crop, scale, rotate, flip.

    Crop edges are source pixels. With the source size known the crop window
    is clamped and written in pixels; otherwise it is written relative to the
    input (``iw-L-R``, ``ih-T-B``). Identity components emit no stage, so the
    default transform compiles to [].
    """
    filters = [
        expr.render() for expr in build_transform_exprs(transform, source_width, source_height)
    ]
    if filters:
        logger.debug(f"[TRANSFORM] {transform.clip_id}: {','.join(filters)}")
    return filters


def build_overlay_position(transform: Transform) -> tuple[Expr, Expr]:
    """Overlay x/y placing the clip centre at the frame centre plus its offset."""
    x = transform.position.x
    y = transform.position.y
    return (
        Expr(f"(main_w/2)+({x:g})-(overlay_w/2)"),
        Expr(f"(main_h/2)+({y:g})-(overlay_h/2)"),
    )
