from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Union
import logging
import os

import cv2
import numpy as np
from dotenv import load_dotenv

from ..errors import ImageReadError, ImageWriteError, TruncatedFileError
from ..models.image import PixelBuffer
from ..models.tga_header import HEADER_SIZE, TgaHeader

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O for PixelBuffer entities: the TGA codec lives here.
    Nothing outside this file knows about on-disk scanline order.
    """
    def __init__(self):
        exts = os.getenv("TGABLEND_VALID_EXTENSIONS", ".tga")
        self.VALID_EXTS = {ext.strip().lower() for ext in exts.split(",") if ext.strip()}

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> PixelBuffer:
        if path is None:
            return PixelBuffer(pixels)
        return PixelBuffer(pixels=pixels, path=Path(path))

    # ---------- private helpers ----------
    @staticmethod
    def _read_exact(fh: BinaryIO, size: int, what: str, path: Path) -> bytes:
        try:
            data = fh.read(size)
        except OSError as err:
            raise ImageReadError(f"{path}: Read failed while reading {what}: {err}") from err
        if len(data) != size:
            raise TruncatedFileError(
                f"{path}: Truncated file, expected {size} bytes of {what}, got {len(data)}"
            )
        return data

    # ---------- public API ----------
    @staticmethod
    def load(path: Union[str, Path]) -> PixelBuffer:
        """
        Decode an uncompressed 24-bit TGA into a canonical (bottom row first) buffer.

        Raises:
            ImageReadError: the file can't be opened or read.
            TruncatedFileError: header, image ID or payload is short.
            FormatError: color-mapped, compressed, non-24-bit or empty image.
        """
        path = Path(path)
        try:
            fh = path.open("rb")
        except OSError as err:
            raise ImageReadError(f"Can't open TGA: {path}") from err

        with fh:
            header = TgaHeader.unpack(ImageRepository._read_exact(fh, HEADER_SIZE, "header", path))
            header.validate(path)
            if header.id_length:
                ImageRepository._read_exact(fh, header.id_length, "image ID", path)
            payload = ImageRepository._read_exact(fh, header.payload_size, "pixel payload", path)

        rows = np.frombuffer(payload, dtype=np.uint8).reshape(header.height, header.width, 3)
        if header.top_origin:
            # whole scanlines swap places; left-to-right order inside a row is kept
            pixels = np.flipud(rows).copy()
        else:
            pixels = rows.copy()

        logger.debug(
            "Decoded %s: %dx%d, %s origin",
            path, header.width, header.height, "top-left" if header.top_origin else "bottom-left",
        )
        return PixelBuffer(pixels=pixels, path=path)

    @staticmethod
    def save(image: PixelBuffer, path: Union[str, Path] = None) -> Path:
        """
        Encode *image* as an uncompressed 24-bit TGA with bottom-left origin.

        Falls back to ``image.path`` when *path* is omitted. A failed write may
        leave a truncated file behind; callers must not trust it.
        """
        if path is None:
            path = image.path
        if path is None:
            raise ValueError("No destination path given and image has no path")
        path = Path(path)

        header = TgaHeader.for_image(image.width, image.height)
        payload = np.ascontiguousarray(image.pixels).tobytes()

        try:
            fh = path.open("wb")
        except OSError as err:
            raise ImageWriteError(f"Can't write TGA: {path}") from err

        with fh:
            try:
                written = fh.write(header.pack())
                written += fh.write(payload)
                fh.flush()
            except OSError as err:
                raise ImageWriteError(f"Write failed: {path}: {err}") from err

        if written != len(payload) + HEADER_SIZE:
            raise ImageWriteError(f"Write failed: {path}: wrote {written} of {len(payload) + HEADER_SIZE} bytes")

        logger.debug("Encoded %s: %dx%d", path, image.width, image.height)
        return path

    @staticmethod
    def export_preview(image: PixelBuffer, path: Union[str, Path]) -> Path:
        """Write a PNG/JPEG/BMP (chosen by suffix) for viewing; top row first, as OpenCV expects."""
        path = Path(path)
        top_first = cv2.flip(np.ascontiguousarray(image.pixels), 0)
        try:
            ok = cv2.imwrite(str(path), top_first)
        except cv2.error as err:
            raise ImageWriteError(f"Preview export failed: {path}: {err}") from err
        if not ok:
            raise ImageWriteError(f"Preview export failed: {path}")
        return path

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[PixelBuffer]:
        """
        Yield PixelBuffer objects one at a time.  Nothing accumulates in memory.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed or not p.is_file():
                logger.debug("Skipping %s", p)
                continue
            try:
                image = self.load(p)
            except (ImageReadError, ValueError) as err:
                logger.warning("Skipping %s: %s", p.name, err)
                continue
            yield image
