"""Tests for frame decoding."""

import pytest

from doodle_link.decoder import (
    LoadRequest,
    SaveBlob,
    ScreenUpdateFrame,
    decode,
    decode_screen,
)
from doodle_link.protocol import FrameKind, MalformedNumericField, RawFrame
from doodle_link.tiles import ScreenGrid, Tile, tile_for_token


class TestScreenDecode:
    """Single-frame screen update decoding."""

    def test_all_air_scenario(self, screen_frame):
        screen = decode_screen(screen_frame())

        assert screen.score == 0
        assert screen.difficulty == 0
        assert screen.lost is False
        assert screen.grid == ScreenGrid.empty()
        assert screen.errors == ()

    def test_tiles_score_and_difficulty(self, screen_frame, mixed_tokens):
        screen = decode_screen(screen_frame(mixed_tokens, score=b"987", difficulty=b"5"))

        assert screen.score == 987
        assert screen.difficulty == 5
        assert screen.grid.cells == tuple(tile_for_token(t) for t in mixed_tokens)

    def test_lose_flag_clears_grid(self, screen_frame, mixed_tokens):
        screen = decode_screen(screen_frame(mixed_tokens, score=b"042", lost=b"1"))

        assert screen.lost is True
        assert screen.score == 42
        assert screen.grid == ScreenGrid.empty()

    @pytest.mark.parametrize("flag", [b"0", b"2", b"x"])
    def test_other_lose_flags_continue(self, screen_frame, mixed_tokens, flag):
        screen = decode_screen(screen_frame(mixed_tokens, lost=flag))

        assert screen.lost is False
        assert screen.grid.cells[0] is Tile.DOODLER_UP

    def test_unknown_token_is_not_an_error(self, screen_frame):
        tokens = [b"02"] * 80
        tokens[17] = b"zz"

        screen = decode_screen(screen_frame(tokens))

        assert screen.grid.cells[17] is Tile.UNKNOWN
        assert screen.grid.cells[16] is Tile.NORMAL_STEP
        assert screen.errors == ()

    def test_malformed_score_partial_decode(self, screen_frame, mixed_tokens):
        screen = decode_screen(screen_frame(mixed_tokens, score=b"1a3", difficulty=b"7"))

        assert screen.score is None
        assert screen.difficulty == 7
        assert screen.grid.cells[0] is Tile.DOODLER_UP
        assert len(screen.errors) == 1
        assert screen.errors[0].field == "score"
        assert screen.errors[0].raw == b"1a3"

    @pytest.mark.parametrize("score", [b" 12", b"+12", b"-12"])
    def test_score_must_be_plain_digits(self, screen_frame, score):
        screen = decode_screen(screen_frame(score=score))
        assert screen.score is None

    def test_malformed_difficulty(self, screen_frame):
        screen = decode_screen(screen_frame(difficulty=b"?"))

        assert screen.difficulty is None
        assert [e.field for e in screen.errors] == ["difficulty"]

    def test_strict_raises(self, screen_frame):
        with pytest.raises(MalformedNumericField):
            decode_screen(screen_frame(score=b"abc"), strict=True)

    def test_wrong_length_rejected(self, screen_frame):
        with pytest.raises(ValueError):
            decode_screen(screen_frame()[:-1])


class TestDecode:
    """Dispatch on frame kind."""

    def test_screen_update(self, screen_frame):
        decoded = decode(RawFrame(FrameKind.SCREEN_UPDATE, screen_frame()))
        assert isinstance(decoded, ScreenUpdateFrame)

    def test_save_blob_passes_through(self):
        payload = bytes(range(32, 127)) * 4 + b"abcde"
        decoded = decode(RawFrame(FrameKind.SAVE_BLOB, b"1" + payload))

        assert decoded == SaveBlob(payload)

    def test_load_request_passes_through(self):
        decoded = decode(RawFrame(FrameKind.LOAD_REQUEST, b"2" + b"load-request"))

        assert decoded == LoadRequest(b"load-request")

    def test_decode_is_pure(self, screen_frame, mixed_tokens):
        frame = RawFrame(FrameKind.SCREEN_UPDATE, screen_frame(mixed_tokens))
        assert decode(frame) == decode(frame)
