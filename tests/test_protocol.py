"""Tests for the frame accumulator."""

import pytest

from doodle_link.protocol import (
    FRAME_LENGTHS,
    LOSE_FLAG_OFFSET,
    PART_FRAME_SIZE,
    SCORE_OFFSET,
    SCREEN_FRAME_SIZE,
    FrameAccumulator,
    FrameKind,
    FrameOverflow,
    ProtocolRevision,
    RawFrame,
    UnknownFrameKind,
)


class TestLayout:
    """Wire layout constants."""

    def test_screen_layout(self):
        assert SCORE_OFFSET == 161
        assert LOSE_FLAG_OFFSET == 165
        assert SCREEN_FRAME_SIZE == 166

    def test_part_layout(self):
        assert PART_FRAME_SIZE == 42

    def test_every_revision_covers_every_kind(self):
        for lengths in FRAME_LENGTHS.values():
            assert set(lengths) == set(FrameKind)

    def test_missing_length_rejected(self):
        with pytest.raises(ValueError):
            FrameAccumulator({FrameKind.SCREEN_UPDATE: 166})


class TestFrameAccumulator:
    """Chunk accumulation into fixed-length frames."""

    def test_whole_frame_in_one_chunk(self, screen_frame):
        data = screen_frame()
        acc = FrameAccumulator()

        frame = acc.feed(data)

        assert frame == RawFrame(FrameKind.SCREEN_UPDATE, data)
        assert acc.pending == 0
        assert acc.kind is None

    @pytest.mark.parametrize("size", [1, 2, 7, 83, 165])
    def test_chunking_invariance(self, screen_frame, mixed_tokens, size):
        data = screen_frame(mixed_tokens, score=b"123", difficulty=b"4")
        acc = FrameAccumulator()

        frames = []
        for i in range(0, len(data), size):
            frame = acc.feed(data[i : i + size])
            if frame is not None:
                frames.append(frame)

        assert frames == [RawFrame(FrameKind.SCREEN_UPDATE, data)]

    def test_partial_frame_awaits_more(self, screen_frame):
        acc = FrameAccumulator()

        assert acc.feed(screen_frame()[:100]) is None
        assert acc.kind is FrameKind.SCREEN_UPDATE
        assert acc.pending == 100
        assert acc.remaining == 66

    def test_remaining_between_frames(self):
        assert FrameAccumulator().remaining is None

    def test_save_and_load_lengths(self):
        acc = FrameAccumulator()

        save = acc.feed(b"1" + b"x" * 415)
        load = acc.feed(b"2" + b"y" * 12)

        assert save.kind is FrameKind.SAVE_BLOB
        assert save.payload == b"x" * 415
        assert load.kind is FrameKind.LOAD_REQUEST
        assert load.payload == b"y" * 12

    def test_unknown_kind_discards_chunk(self):
        acc = FrameAccumulator()

        with pytest.raises(UnknownFrameKind) as exc_info:
            acc.feed(b"9abc")

        assert exc_info.value.marker == ord("9")
        assert acc.pending == 0
        assert acc.kind is None

    def test_overflow_resets(self, screen_frame):
        data = screen_frame()
        acc = FrameAccumulator()
        acc.feed(data[:160])

        with pytest.raises(FrameOverflow) as exc_info:
            acc.feed(data[160:] + b"00")

        assert exc_info.value.kind is FrameKind.SCREEN_UPDATE
        assert exc_info.value.expected == 166
        assert exc_info.value.actual == 168
        assert acc.pending == 0

        # next well-formed frame goes straight through
        assert acc.feed(data) == RawFrame(FrameKind.SCREEN_UPDATE, data)

    def test_overflow_in_single_chunk(self):
        acc = FrameAccumulator()

        with pytest.raises(FrameOverflow):
            acc.feed(b"2" + b"0" * 20)

    def test_empty_chunk_is_noop(self):
        acc = FrameAccumulator()
        assert acc.feed(b"") is None
        assert acc.kind is None

    def test_multipart_lengths(self, screen_part):
        tokens = [b"02"] * 20
        acc = FrameAccumulator(FRAME_LENGTHS[ProtocolRevision.MULTIPART])

        frame = acc.feed(screen_part(tokens, 0, marker=True))

        assert frame.kind is FrameKind.SCREEN_UPDATE
        assert len(frame.data) == 42

    def test_reset_drops_pending(self, screen_frame):
        acc = FrameAccumulator()
        acc.feed(screen_frame()[:50])

        acc.reset()

        assert acc.pending == 0
        assert acc.kind is None
