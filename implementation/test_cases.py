"""
Automated test cases for the Haar compression project.
Collected by pytest, and also runnable from the menu through run_all().
"""

import os
import tempfile
from unittest import mock

import numpy as np
from PIL import Image

from compressor import Compressor, compress_progressive, compress_single, keep_quadrant
from errors import DecodeFailure, EncodeFailure, InvalidParameter
from image_io import load_image, save_image, show_and_save_images
from main import main, progressive_names
from pixel_buffer import PixelBuffer
from reconstructor import Reconstructor
from utils import psnr, retained_coefficients


def make_buffer(height, width, seed=0):
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_array(rng.integers(0, 256, (height, width, 3)))


def expect_invalid(fn, *args):
    try:
        fn(*args)
    except InvalidParameter:
        return
    raise AssertionError(f"{fn.__name__}{args} did not raise InvalidParameter")


# -----------------------------------------------------------
# TEST CASE 1: 2x2 white image, ratio 0 and ratio 1
# -----------------------------------------------------------
def test_white_2x2():
    """2x2 white: ratio 0 keeps it white, ratio 1 turns it black."""
    white = PixelBuffer.from_grid([[[255, 255, 255], [255, 255, 255]],
                                   [[255, 255, 255], [255, 255, 255]]], 2, 2)

    assert compress_single(white, 0.0) == white

    black = compress_single(white, 1.0)
    assert black == PixelBuffer.blank(2, 2)


# -----------------------------------------------------------
# TEST CASE 2: ratio 0 is lossless for any size
# -----------------------------------------------------------
def test_round_trip_lossless():
    """Ratio 0 reproduces the pixels exactly, padded or not."""
    for h, w in [(1, 1), (1, 2), (3, 5), (8, 8), (13, 6)]:
        img = make_buffer(h, w, seed=h * 31 + w)
        out = compress_single(img, 0)
        assert out == img, (h, w)
        assert psnr(img, out) == float('inf')


# -----------------------------------------------------------
# TEST CASE 3: ratio 1 collapses everything to black
# -----------------------------------------------------------
def test_full_collapse():
    """Ratio 1 zeroes every coefficient, the DC term included."""
    img = make_buffer(6, 9, seed=3)
    meta = Compressor(1.0).compress(img)
    assert meta['threshold'] is None
    assert meta['zeroed'] == meta['coefficients'] == 3 * 16 * 16
    assert not meta['image'].pixels.any()


# -----------------------------------------------------------
# TEST CASE 4: more ratio, more zeroed coefficients
# -----------------------------------------------------------
def test_monotonic_threshold():
    """Zeroed coefficient count and threshold never decrease with the ratio."""
    img = make_buffer(16, 11, seed=7)
    ratios = [0.0, 0.05, 0.2, 0.35, 0.5, 0.75, 0.9, 0.99, 1.0]
    zeroed = [Compressor(r).compress(img)['zeroed'] for r in ratios]
    assert zeroed == sorted(zeroed)
    assert zeroed[0] < zeroed[-1]

    thresholds = [Compressor(r).compress(img)['threshold'] for r in ratios[1:-1]]
    assert thresholds == sorted(thresholds)


def test_threshold_trace():
    """The selected threshold is handed to the trace callback."""
    seen = []
    img = make_buffer(4, 4, seed=1)
    meta = Compressor(0.5, trace=seen.append).compress(img)
    assert seen == [meta['threshold']]
    assert meta['threshold'] > 0


# -----------------------------------------------------------
# TEST CASE 5: invalid parameters
# -----------------------------------------------------------
def test_invalid_ratio():
    """Ratios outside [0,1] fail before any work is done."""
    img = make_buffer(2, 2)
    for ratio in (-0.1, 1.5, float('nan'), "abc"):
        expect_invalid(compress_single, img, ratio)
        expect_invalid(Compressor, ratio)


# -----------------------------------------------------------
# TEST CASE 6: progressive compression
# -----------------------------------------------------------
def test_progressive_stage_count():
    """Padded side 2^k gives k+1 stages."""
    cases = {(1, 1): 1, (2, 2): 2, (3, 5): 4, (8, 8): 4, (9, 2): 5}
    for (h, w), expected in cases.items():
        stages = compress_progressive(make_buffer(h, w))
        assert len(stages) == expected, (h, w)


def test_progressive_ordering():
    """Finest stage is lossless, coarsest is the DC-only flat image."""
    img = make_buffer(5, 3, seed=11)
    stages = compress_progressive(img)

    assert stages[0] == img

    # DC only: every pixel holds the mean of the zero-padded 8x8 channel
    last = stages[-1].pixels
    for ch in range(3):
        mean = img.pixels[:, :, ch].sum() / 64.0
        assert np.all(last[:, :, ch] == last[0, 0, ch])
        assert abs(last[0, 0, ch] - mean) <= 0.5 + 1e-9

    side = 8
    kept = [retained_coefficients(side, side * 2 >> j) for j in range(len(stages))]
    assert kept == [64, 16, 4, 1]


def test_progressive_stages_independent():
    """Each stage is a projection of the same decomposition."""
    img = make_buffer(7, 6, seed=5)
    comp = Compressor()
    side, coeffs = comp.decompose(img)
    stages = comp.progressive(img)
    recon = Reconstructor(img.width, img.height)
    for j, stage in enumerate(stages):
        size = side >> j
        assert stage == recon.reconstruct([keep_quadrant(c, size) for c in coeffs])


# -----------------------------------------------------------
# TEST CASE 7: output size matches input size
# -----------------------------------------------------------
def test_dimension_preservation():
    for h, w in [(1, 7), (6, 2), (3, 3), (10, 17)]:
        img = make_buffer(h, w)
        assert compress_single(img, 0.6).shape == (h, w)
        for stage in compress_progressive(img):
            assert (stage.height, stage.width) == (h, w)
            assert stage.pixels.min() >= 0 and stage.pixels.max() <= 255


# -----------------------------------------------------------
# TEST CASE 8: image files and command line
# -----------------------------------------------------------
def test_image_io_round_trip():
    img = make_buffer(5, 4, seed=2)
    with tempfile.TemporaryDirectory() as tmp:
        path = save_image(img, os.path.join(tmp, "img.png"))
        assert load_image(path) == img

        bad = os.path.join(tmp, "not_an_image.png")
        with open(bad, "wb") as f:
            f.write(b"definitely not a png")
        try:
            load_image(bad)
        except DecodeFailure:
            pass
        else:
            raise AssertionError("garbage file was decoded")

        try:
            save_image(img, os.path.join(tmp, "img.unknownext"))
        except EncodeFailure:
            pass
        else:
            raise AssertionError("unknown extension was written")

        montage = show_and_save_images([img, img], ["a", "b"], out_name="m.png",
                                       out_dir=tmp, show=False)
        assert os.path.isfile(montage)


def test_cli_compress_and_progressive():
    arr = np.zeros((3, 5, 3), dtype=np.uint8)
    arr[..., 0] = np.linspace(0, 255, 5, dtype=np.uint8)
    arr[1, :, 2] = 200
    with tempfile.TemporaryDirectory() as tmp:
        src = os.path.join(tmp, "in.png")
        Image.fromarray(arr).save(src)
        out = os.path.join(tmp, "out.png")

        assert main(["-i", src, "-o", out, "-compress", "40", "-progressive"]) == 0
        assert load_image(out).shape == (3, 5)
        names = progressive_names(out, 4)
        assert names[0].endswith("out-3.png") and names[-1].endswith("out-0.png")
        for name in names:
            assert os.path.isfile(name)
        assert np.array_equal(load_image(names[0]).pixels, arr)

        assert main(["-i", src, "-o", out, "-compress", "150"]) == 1
        assert main(["-i", os.path.join(tmp, "missing.png"), "-compress", "10"]) == 1


def test_menu_survives_bad_paths():
    """The menu reports directories and missing files and keeps running."""
    with tempfile.TemporaryDirectory() as tmp:
        answers = ["1", tmp, "2", os.path.join(tmp, "missing.png"), "4"]
        with mock.patch("builtins.input", side_effect=answers):
            assert main([]) == 0


# -----------------------------------------------------------
# Run all tests
# -----------------------------------------------------------
def run_all():
    tests = [
        test_white_2x2, test_round_trip_lossless, test_full_collapse,
        test_monotonic_threshold, test_threshold_trace, test_invalid_ratio,
        test_progressive_stage_count, test_progressive_ordering,
        test_progressive_stages_independent, test_dimension_preservation,
        test_image_io_round_trip, test_cli_compress_and_progressive,
        test_menu_survives_bad_paths,
    ]
    failed = 0

    for t in tests:
        print(f"\nRunning {t.__name__} ...")
        try:
            t()
        except AssertionError as exc:
            failed += 1
            print(f"✗ Failed: {t.__name__} {exc}")
            continue
        print(f"✓ Completed: {t.__name__}")
        if t.__doc__:
            print(f"  Notes:      {t.__doc__.strip()}")

    print(f"\nAll test cases finished, {failed} failed.\n")
    return failed
