# pipeline/blend_files.py
from __future__ import annotations

from pathlib import Path
import logging

from ..models.blend_mode import BlendMode
from ..services.compositing_service import CompositingService
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def blend_files(
    mode: BlendMode | str,
    base_path: str | Path,
    overlay_path: str | Path,
    output_path: str | Path,
    *,
    image_service: ImageService | None = None,
) -> Path:
    """
    Decode *base_path* and *overlay_path*, blend overlay onto base, encode the
    result to *output_path*. Any failure propagates and nothing is retried.
    """
    image_service = image_service or ImageService()
    mode = BlendMode.from_name(mode)

    logger.info("Loading base: %s", base_path)
    base = image_service.load(base_path)

    logger.info("Loading overlay: %s", overlay_path)
    overlay = image_service.load(overlay_path)

    logger.info("Blending with mode: %s", mode.value)
    result = CompositingService.apply(base, overlay, mode)

    logger.info("Saving to: %s", output_path)
    return image_service.save(result, output_path)
