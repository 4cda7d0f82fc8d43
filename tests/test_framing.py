"""Tests for frame grid construction."""

import math

import numpy as np
import pytest

from timbral.core.framing import (
    as_signal,
    build_ranges,
    frame,
    frame_matrix,
    pad_amount,
    pad_right,
    total_frames,
)
from timbral.errors import InvalidParameterError, InvalidSignalError


class TestTotalFrames:
    def test_one_second_at_default_grid(self):
        assert total_frames(22050, 2048, 512) == math.ceil((22050 - 2048) / 512) + 1
        assert total_frames(22050, 2048, 512) == 41

    def test_exact_fit(self):
        assert total_frames(2048 + 3 * 512, 2048, 512) == 4

    def test_signal_equal_to_frame(self):
        assert total_frames(2048, 2048, 512) == 1

    def test_short_signal_still_gets_one_frame(self):
        assert total_frames(100, 2048, 512) == 1
        assert total_frames(0, 2048, 512) == 1


class TestPadAmount:
    def test_default_grid(self):
        assert pad_amount(22050, 2048, 512) == 478

    def test_no_padding_on_exact_fit(self):
        assert pad_amount(3584, 2048, 512) == 0

    def test_short_signal_padded_to_one_frame(self):
        assert pad_amount(100, 2048, 512) == 1948

    @pytest.mark.parametrize("frame_size", [1, 4, 7, 16])
    @pytest.mark.parametrize("hop_length", [1, 2, 3, 5, 16])
    def test_minimal_alignment(self, frame_size, hop_length):
        for n in range(frame_size, frame_size + 40):
            pad = pad_amount(n, frame_size, hop_length)
            assert pad >= 0
            assert (n + pad - frame_size) % hop_length == 0
            assert pad < hop_length


class TestPadRight:
    def test_appends_fill_columns(self):
        x = np.ones((2, 3))
        padded = pad_right(x, 2, fill=-1.0)
        assert padded.shape == (2, 5)
        np.testing.assert_array_equal(padded[:, 3:], -1.0)
        np.testing.assert_array_equal(padded[:, :3], 1.0)

    def test_zero_pad_is_noop(self):
        x = np.ones((1, 3))
        assert pad_right(x, 0) is x

    def test_input_not_mutated(self):
        x = np.ones((2, 3), dtype=np.float32)
        padded = pad_right(x, 4)
        assert x.shape == (2, 3)
        assert padded.dtype == np.float32


class TestBuildRanges:
    def test_ranges_cover_padded_length(self):
        ranges = build_ranges(10, 4, 3)
        assert ranges == [range(0, 4), range(3, 7), range(6, 10)]

    @pytest.mark.parametrize("n,frame_size,hop_length", [
        (22050, 2048, 512),
        (1000, 256, 100),
        (17, 4, 1),
        (5, 8, 2),
    ])
    def test_grid_properties(self, n, frame_size, hop_length):
        padded_length = n + pad_amount(n, frame_size, hop_length)
        ranges = build_ranges(padded_length, frame_size, hop_length)

        assert len(ranges) == total_frames(padded_length, frame_size, hop_length)
        assert len(ranges) == total_frames(n, frame_size, hop_length)
        assert all(len(r) == frame_size for r in ranges)
        starts = [r.start for r in ranges]
        assert starts[0] == 0
        assert all(b - a == hop_length for a, b in zip(starts, starts[1:]))
        assert ranges[-1].stop == padded_length


class TestFrame:
    def test_rejects_zero_hop(self):
        with pytest.raises(InvalidParameterError):
            frame(np.zeros((1, 100)), 16, 0)

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            frame(np.zeros((1, 100)), 16, -3)

    def test_rejects_zero_frame_size(self):
        with pytest.raises(InvalidParameterError):
            frame(np.zeros((1, 100)), 0, 4)

    def test_pads_and_builds_ranges(self, pure_sine):
        y, _ = pure_sine
        padded, ranges = frame(y)
        assert padded.shape == (1, 22528)
        assert len(ranges) == 41
        np.testing.assert_array_equal(padded[:, :22050], y)
        np.testing.assert_array_equal(padded[:, 22050:], 0.0)

    def test_short_signal(self):
        padded, ranges = frame(np.ones((2, 3)), 8, 4)
        assert padded.shape == (2, 8)
        assert ranges == [range(0, 8)]

    def test_mono_vector_promoted(self):
        padded, _ = frame(np.ones(3584), 2048, 512)
        assert padded.shape == (1, 3584)


class TestFrameMatrix:
    def test_columns_match_ranges(self, stereo_signal):
        y, _ = stereo_signal
        padded, ranges = frame(y, 256, 100)
        frames = frame_matrix(y, 256, 100)

        assert frames.shape == (2, 256, len(ranges))
        for t, r in enumerate(ranges):
            np.testing.assert_array_equal(frames[:, :, t], padded[:, r.start:r.stop])

    def test_view_is_read_only(self):
        frames = frame_matrix(np.zeros((1, 64)), 16, 8)
        with pytest.raises(ValueError):
            frames[0, 0, 0] = 1.0


class TestAsSignal:
    def test_keeps_two_dimensional_input(self):
        x = np.zeros((3, 10))
        assert as_signal(x) is x

    def test_rejects_three_dimensions(self):
        with pytest.raises(InvalidSignalError):
            as_signal(np.zeros((1, 2, 3)))

    def test_rejects_no_channels(self):
        with pytest.raises(InvalidSignalError):
            as_signal(np.zeros((0, 10)))

    def test_rejects_integer_samples(self):
        with pytest.raises(InvalidSignalError):
            as_signal(np.zeros((1, 10), dtype=np.int16))


class TestGridParameterChecks:
    @pytest.mark.parametrize("hop_length", [0, -1])
    def test_total_frames_rejects_bad_hop(self, hop_length):
        with pytest.raises(InvalidParameterError):
            total_frames(5000, 2048, hop_length)

    @pytest.mark.parametrize("hop_length", [0, -1])
    def test_pad_amount_rejects_bad_hop(self, hop_length):
        with pytest.raises(InvalidParameterError):
            pad_amount(5000, 2048, hop_length)

    @pytest.mark.parametrize("hop_length", [0, -1])
    def test_build_ranges_rejects_bad_hop(self, hop_length):
        with pytest.raises(InvalidParameterError):
            build_ranges(5000, 2048, hop_length)

    def test_build_ranges_rejects_zero_frame_size(self):
        with pytest.raises(InvalidParameterError):
            build_ranges(5000, 0, 512)
