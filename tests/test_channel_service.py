import numpy as np
import pytest

from tgablend.errors import DimensionMismatchError
from tgablend.models.image import PixelBuffer
from tgablend.services.channel_service import ChannelService


class TestSplitCombine:

    def test_split_broadcasts_each_channel(self, make_buffer):
        image = make_buffer([[(10, 20, 30), (40, 50, 60)]])
        red, green, blue = ChannelService.split_rgb(image)

        assert red.pixels.tolist() == [[[30, 30, 30], [60, 60, 60]]]
        assert green.pixels.tolist() == [[[20, 20, 20], [50, 50, 50]]]
        assert blue.pixels.tolist() == [[[10, 10, 10], [40, 40, 40]]]

    def test_split_then_combine_is_identity(self, random_buffer):
        image = random_buffer(9, 4)
        assert ChannelService.combine_rgb(*ChannelService.split_rgb(image)) == image

    def test_combine_reads_the_matching_slot_of_each_source(self, make_buffer):
        red = make_buffer([[(1, 2, 3)]])
        green = make_buffer([[(4, 5, 6)]])
        blue = make_buffer([[(7, 8, 9)]])
        combined = ChannelService.combine_rgb(red, green, blue)
        # (blue from blue's blue slot, green from green's green slot, red from red's red slot)
        assert combined.pixels.reshape(3).tolist() == [7, 5, 3]

    def test_combine_size_mismatch(self):
        a = PixelBuffer.filled(2, 2)
        b = PixelBuffer.filled(2, 3)
        with pytest.raises(DimensionMismatchError, match="Combine"):
            ChannelService.combine_rgb(a, a, b)

    def test_split_leaves_source_untouched(self, random_buffer):
        image = random_buffer()
        before = image.copy()
        ChannelService.split_rgb(image)
        assert image == before


class TestRotate180:

    def test_reverses_pixel_sequence_keeping_triplets(self, make_buffer):
        image = make_buffer([
            [(1, 2, 3), (4, 5, 6), (7, 8, 9)],
            [(10, 11, 12), (13, 14, 15), (16, 17, 18)],
        ])
        rotated = ChannelService.rotate180(image)

        expected = image.pixels.reshape(-1, 3)[::-1]
        np.testing.assert_array_equal(rotated.pixels.reshape(-1, 3), expected)
        assert rotated.size == image.size

    def test_involution(self, random_buffer):
        image = random_buffer(11, 6)
        assert ChannelService.rotate180(ChannelService.rotate180(image)) == image

    def test_single_row_and_column(self, make_buffer):
        row = make_buffer([[(1, 1, 1), (2, 2, 2)]])
        col = make_buffer([[(1, 1, 1)], [(2, 2, 2)]])
        assert ChannelService.rotate180(row).pixels[0, 0].tolist() == [2, 2, 2]
        assert ChannelService.rotate180(col).pixels[0, 0].tolist() == [2, 2, 2]

    def test_returns_new_buffer(self, random_buffer):
        image = random_buffer()
        rotated = ChannelService.rotate180(image)
        assert not np.shares_memory(rotated.pixels, image.pixels)
