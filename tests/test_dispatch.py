"""
Tests for backend selection and the explicit fallback policy.

Canvas ceilings are shrunk through config so fallbacks can be triggered
with tiny images.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from _pytest.logging import LogCaptureFixture
from PIL import Image
from pytest_mock import MockerFixture

import image_merger.dispatch as im_dispatch
from image_merger.codecs import CanvasCodec, PillowCodec
from image_merger.config import MergerConfig
from image_merger.errors import (
    CanvasTooLargeError,
    DecodeError,
    EncodeError,
    InvalidInputError,
)
from image_merger.geometry import ResizeSpec
from image_merger.request import MergeRequest


@pytest.fixture
def small_canvas_config(
    make_config: Callable[..., MergerConfig],
) -> MergerConfig:
    """Config whose canvas backend refuses anything above 100 pixels."""
    return make_config(canvas={"max_area": 100})


class TestBuildCodec:
    def test_canvas(self, make_config: Callable[..., MergerConfig]) -> None:
        cfg = make_config(canvas={"max_area": 5, "max_side": 7})
        codec = im_dispatch.build_codec("canvas", cfg)
        assert isinstance(codec, CanvasCodec)
        assert (codec.max_area, codec.max_side) == (5, 7)

    def test_codec(self, make_config: Callable[..., MergerConfig]) -> None:
        cfg = make_config(canvas={"compress_level": 6})
        codec = im_dispatch.build_codec("codec", cfg)
        assert isinstance(codec, PillowCodec)
        assert codec.compress_level == 6  # noqa: PLR2004

    def test_unknown(self, make_config: Callable[..., MergerConfig]) -> None:
        with pytest.raises(ValueError, match="Unknown backend"):
            im_dispatch.build_codec("gpu", make_config())


class TestChooseBackend:
    def test_plain_request_uses_canvas(
        self,
        make_config: Callable[..., MergerConfig],
    ) -> None:
        request = MergeRequest([b""])
        assert im_dispatch.choose_backend(request, make_config()) == "canvas"

    @pytest.mark.parametrize(
        "kwargs",
        [{"align": "height"}, {"resize": ResizeSpec(height=10)}],
    )
    def test_resampling_requires_codec(
        self,
        make_config: Callable[..., MergerConfig],
        kwargs: dict[str, object],
    ) -> None:
        request = MergeRequest([b""], **kwargs)  # type: ignore[arg-type]
        assert im_dispatch.choose_backend(request, make_config()) == "codec"

    def test_forced_backend_wins(
        self,
        make_config: Callable[..., MergerConfig],
    ) -> None:
        cfg = make_config(execution={"backend": "canvas"})
        request = MergeRequest([b""], align="width")
        assert im_dispatch.choose_backend(request, cfg) == "canvas"


class TestRunMerge:
    def test_canvas_success(
        self,
        make_config: Callable[..., MergerConfig],
        make_png: Callable[..., bytes],
    ) -> None:
        outcome = im_dispatch.run_merge(
            MergeRequest([make_png(4, 4), make_png(4, 4)]), make_config(),
        )
        assert outcome.ok
        assert outcome.backend == "canvas"
        assert outcome.fallback_from is None
        assert outcome.unwrap().startswith(b"\x89PNG")

    def test_too_large_falls_back_to_codec(
        self,
        small_canvas_config: MergerConfig,
        make_png: Callable[..., bytes],
        caplog: LogCaptureFixture,
    ) -> None:
        request = MergeRequest([make_png(10, 10), make_png(10, 10)])
        with caplog.at_level("WARNING"):
            outcome = im_dispatch.run_merge(request, small_canvas_config)
        assert outcome.ok
        assert outcome.backend == "codec"
        assert outcome.fallback_from is not None
        assert isinstance(outcome.fallback_from.error, CanvasTooLargeError)
        assert "falling back to codec" in caplog.text
        assert outcome.layout is not None
        assert outcome.layout.size.as_tuple() == (20, 10)

    def test_fallback_disabled_surfaces_error(
        self,
        make_config: Callable[..., MergerConfig],
        make_png: Callable[..., bytes],
    ) -> None:
        cfg = make_config(canvas={"max_area": 100},
                          execution={"fallback": False})
        outcome = im_dispatch.run_merge(
            MergeRequest([make_png(10, 10), make_png(10, 10)]), cfg,
        )
        assert not outcome.ok
        assert outcome.backend == "canvas"
        with pytest.raises(CanvasTooLargeError):
            outcome.unwrap()

    def test_forced_canvas_never_falls_back(
        self,
        make_config: Callable[..., MergerConfig],
        make_png: Callable[..., bytes],
    ) -> None:
        cfg = make_config(canvas={"max_area": 100},
                          execution={"backend": "canvas"})
        outcome = im_dispatch.run_merge(
            MergeRequest([make_png(10, 10), make_png(10, 10)]), cfg,
        )
        assert isinstance(outcome.error, CanvasTooLargeError)

    def test_decode_failure_does_not_fall_back(
        self,
        make_config: Callable[..., MergerConfig],
        mocker: MockerFixture,
    ) -> None:
        spy = mocker.spy(im_dispatch, "try_merge")
        outcome = im_dispatch.run_merge(MergeRequest([b"nope"]),
                                        make_config())
        assert isinstance(outcome.error, DecodeError)
        assert spy.call_count == 1

    def test_encode_failure_falls_back(
        self,
        make_config: Callable[..., MergerConfig],
        make_png: Callable[..., bytes],
        mocker: MockerFixture,
    ) -> None:
        mocker.patch.object(
            CanvasCodec, "encode_png", side_effect=EncodeError("no memory"),
        )
        outcome = im_dispatch.run_merge(MergeRequest([make_png(3, 3)]),
                                        make_config())
        assert outcome.ok
        assert outcome.backend == "codec"

    def test_invalid_input_reported_in_outcome(
        self,
        make_config: Callable[..., MergerConfig],
    ) -> None:
        outcome = im_dispatch.run_merge(MergeRequest([]), make_config())
        assert isinstance(outcome.error, InvalidInputError)

    def test_merge_raises_final_error(
        self,
        make_config: Callable[..., MergerConfig],
    ) -> None:
        with pytest.raises(InvalidInputError, match="No images"):
            im_dispatch.merge(MergeRequest([]), make_config())

    def test_codec_workers_follow_concurrency(
        self,
        make_config: Callable[..., MergerConfig],
        make_png: Callable[..., bytes],
        mocker: MockerFixture,
    ) -> None:
        spy = mocker.patch.object(
            im_dispatch, "MergePipeline", wraps=im_dispatch.MergePipeline,
        )
        cfg = make_config(execution={"backend": "codec", "concurrency": 3})
        im_dispatch.run_merge(MergeRequest([make_png(2, 2)]), cfg)
        assert spy.call_args.kwargs["max_workers"] == 3  # noqa: PLR2004


class TestResourceLimits:
    def test_pixel_limit_lifted_on_canvas_backend(
        self,
        make_config: Callable[..., MergerConfig],
        make_png: Callable[..., bytes],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Images above Pillow's bomb threshold still merge on auto/canvas."""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        outcome = im_dispatch.run_merge(
            MergeRequest([make_png(20, 20)]), make_config(),
        )
        assert outcome.ok
        assert outcome.backend == "canvas"
        assert outcome.fallback_from is None

    def test_pixel_limit_kept_when_disabled(
        self,
        make_config: Callable[..., MergerConfig],
        make_png: Callable[..., bytes],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        cfg = make_config(execution={"remove_pixel_limit": False})
        outcome = im_dispatch.run_merge(MergeRequest([make_png(20, 20)]), cfg)
        assert isinstance(outcome.error, DecodeError)

    def test_out_of_memory_resize_is_classified(
        self,
        make_config: Callable[..., MergerConfig],
        make_png: Callable[..., bytes],
        mocker: MockerFixture,
    ) -> None:
        mocker.patch.object(Image.Image, "resize", side_effect=MemoryError)
        request = MergeRequest([make_png(10, 10), make_png(20, 20)],
                               align="width")
        outcome = im_dispatch.run_merge(request, make_config())
        assert not outcome.ok
        assert outcome.backend == "codec"
        assert isinstance(outcome.error, EncodeError)
        assert "Out of memory resizing" in str(outcome.error)
