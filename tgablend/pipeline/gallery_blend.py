# pipeline/gallery_blend.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from tqdm import tqdm

from ..errors import DimensionMismatchError
from ..models.blend_mode import BlendMode
from ..services.compositing_service import CompositingService
from ..services.image_service import ImageService

# ------------------------------------------------------------------
# env-vars
load_dotenv()
OUTPUT_DIR = os.getenv("TGABLEND_OUTPUT_DIR", "output")

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def blend_gallery(
    folder: str | Path,
    overlay_path: str | Path,
    mode: BlendMode | str,
    output_dir: str | Path = OUTPUT_DIR,
    *,
    recursive: bool = False,
    image_service: ImageService | None = None,
    progress: bool = True,
) -> List[Path]:
    """
    For every TGA in *folder*:
        • blend the overlay onto it with *mode*
        • write <stem>_<mode>.tga into *output_dir*
    Images whose size differs from the overlay are skipped with a warning.
    Returns the written paths.
    """
    image_service = image_service or ImageService()
    mode = BlendMode.from_name(mode)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    overlay = image_service.load(overlay_path)
    written = []
    gallery = image_service.stream_gallery(folder, recursive=recursive)
    for base in tqdm(gallery, desc=mode.value, ncols=70, disable=not progress):
        try:
            result = CompositingService.apply(base, overlay, mode)
        except DimensionMismatchError as err:
            logger.warning("Skipping %s: %s", base.path.name, err)
            continue
        target = output_dir / f"{base.path.stem}_{mode.value}.tga"
        written.append(image_service.save(result, target))
        logger.info("Wrote %s", target)

    return written
