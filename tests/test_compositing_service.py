import numpy as np
import pytest

from tgablend.errors import DimensionMismatchError
from tgablend.models.blend_mode import BlendMode
from tgablend.models.image import PixelBuffer
from tgablend.services.compositing_service import CompositingService


def solid(bgr, width=3, height=2):
    return PixelBuffer.filled(width, height, bgr)


def reference(mode, b, o):
    """Scalar version of each formula, straight from the blend-mode table."""
    if mode is BlendMode.ADD:
        return min(b + o, 255)
    if mode is BlendMode.SUBTRACT:
        return max(b - o, 0)
    if mode is BlendMode.MULTIPLY:
        return (b * o + 127) // 255
    if mode is BlendMode.SCREEN:
        return 255 - ((255 - b) * (255 - o) + 127) // 255
    if b < 128:
        return (2 * b * o + 127) // 255
    return 255 - (2 * (255 - b) * (255 - o) + 127) // 255


class TestBlendPixel:

    BASE = (200, 150, 100)

    def test_add(self):
        assert CompositingService.blend_pixel(BlendMode.ADD, self.BASE, (50, 50, 50)) == (250, 200, 150)

    def test_subtract_is_base_minus_overlay(self):
        assert CompositingService.blend_pixel(BlendMode.SUBTRACT, self.BASE, (50, 50, 50)) == (150, 100, 50)

    def test_multiply_by_half_gray_rounds_to_nearest(self):
        assert CompositingService.blend_pixel(BlendMode.MULTIPLY, self.BASE, (128, 128, 128)) == (100, 75, 50)

    def test_multiply_rounding_is_not_truncation(self):
        # 255 * 128 / 255 = 128 exactly; 128 * 128 / 255 = 64.25 -> 64; 200 * 200 / 255 = 156.86 -> 157
        assert CompositingService.blend_pixel(BlendMode.MULTIPLY, (255, 128, 200), (128, 128, 200)) == (128, 64, 157)

    def test_add_saturates(self):
        assert CompositingService.blend_pixel(BlendMode.ADD, (250, 250, 250), (10, 10, 10)) == (255, 255, 255)

    def test_subtract_floors_at_zero(self):
        assert CompositingService.blend_pixel(BlendMode.SUBTRACT, (50, 50, 50), (100, 100, 100)) == (0, 0, 0)

    def test_screen(self):
        # 255 - round(155 * 205 / 255) = 255 - 125 = 130
        assert CompositingService.blend_pixel(BlendMode.SCREEN, (100, 0, 255), (50, 0, 0)) == (130, 0, 255)

    def test_overlay_branches_split_at_128(self):
        # 127 takes the multiply branch, 128 the screen branch
        dark = CompositingService.blend_pixel(BlendMode.OVERLAY, (127, 127, 127), (0, 0, 0))
        light = CompositingService.blend_pixel(BlendMode.OVERLAY, (128, 128, 128), (0, 0, 0))
        assert dark == (0, 0, 0)
        assert light == (1, 1, 1)

    def test_overlay_upper_end(self):
        dark = CompositingService.blend_pixel(BlendMode.OVERLAY, (127, 127, 127), (255, 255, 255))
        light = CompositingService.blend_pixel(BlendMode.OVERLAY, (128, 128, 128), (255, 255, 255))
        assert dark == (254, 254, 254)
        assert light == (255, 255, 255)

    def test_mode_names_are_accepted(self):
        assert CompositingService.blend_pixel("add", (1, 2, 3), (1, 1, 1)) == (2, 3, 4)

    @pytest.mark.parametrize("base, over", [
        ((256, 0, 0), (0, 0, 0)),
        ((-1, 0, 0), (0, 0, 0)),
        ((0, 0, 0), (0, 300, 0)),
        ((0, 0), (0, 0, 0)),
    ])
    def test_samples_outside_byte_range_are_rejected(self, base, over):
        with pytest.raises(ValueError, match="BGR triplet"):
            CompositingService.blend_pixel(BlendMode.ADD, base, over)


class TestApply:

    @pytest.mark.parametrize("mode", list(BlendMode))
    def test_matches_scalar_formulas_over_full_range(self, mode):
        values = np.arange(256, dtype=np.uint8)
        base_grid, over_grid = np.meshgrid(values, values, indexing="ij")
        # 256 x 256 image, every (base, overlay) pair once, replicated across channels
        base = PixelBuffer(np.repeat(base_grid[..., None], 3, axis=2))
        over = PixelBuffer(np.repeat(over_grid[..., None], 3, axis=2))

        out = CompositingService.apply(base, over, mode).pixels[..., 0].astype(int)

        expected = np.array([[reference(mode, b, o) for o in range(256)] for b in range(256)])
        np.testing.assert_array_equal(out, expected)

    def test_multiply_identity_and_zero(self, random_buffer):
        image = random_buffer()
        white = PixelBuffer.filled(image.width, image.height, (255, 255, 255))
        black = PixelBuffer.filled(image.width, image.height, (0, 0, 0))

        assert CompositingService.apply(image, white, BlendMode.MULTIPLY) == image
        assert not CompositingService.apply(image, black, BlendMode.MULTIPLY).pixels.any()

    def test_inputs_are_untouched_and_output_is_new(self, random_buffer):
        base, over = random_buffer(), random_buffer()
        base_before, over_before = base.copy(), over.copy()

        out = CompositingService.apply(base, over, BlendMode.SCREEN)

        assert base == base_before and over == over_before
        assert not np.shares_memory(out.pixels, base.pixels)
        assert not np.shares_memory(out.pixels, over.pixels)

    def test_channels_are_independent(self):
        base = solid((10, 200, 250))
        over = solid((20, 100, 10))
        out = CompositingService.apply(base, over, BlendMode.ADD)
        assert out.pixels[0, 0].tolist() == [30, 255, 255]

    @pytest.mark.parametrize("mode", list(BlendMode))
    def test_size_mismatch(self, mode):
        with pytest.raises(DimensionMismatchError, match="base=3x2 vs overlay=2x3"):
            CompositingService.apply(solid((0, 0, 0)), solid((0, 0, 0), 2, 3), mode)

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown blend mode"):
            CompositingService.apply(solid((0, 0, 0)), solid((0, 0, 0)), "dodge")

    def test_scenario_from_concrete_pixels(self):
        base = solid((200, 150, 100), 1, 1)
        assert CompositingService.apply(base, solid((50, 50, 50), 1, 1), BlendMode.ADD).pixels.reshape(3).tolist() == [250, 200, 150]
        assert CompositingService.apply(base, solid((50, 50, 50), 1, 1), BlendMode.SUBTRACT).pixels.reshape(3).tolist() == [150, 100, 50]
        assert CompositingService.apply(base, solid((128, 128, 128), 1, 1), BlendMode.MULTIPLY).pixels.reshape(3).tolist() == [100, 75, 50]
