# CLI entry point - command-line flags, or the interactive menu when run bare

import argparse
import os
import sys

from compressor import Compressor, square_length
from errors import DecodeFailure, EncodeFailure, InvalidParameter
from image_io import OUTPUT_DIR, load_image, save_image, show_and_save_images
from utils import discarded_fraction, psnr, retained_coefficients

DEFAULT_OUTPUT = "out.png"


def progressive_names(output, count):
    """<stem>-<k>.png for each stage; the finest stage gets the highest k."""
    stem = os.path.splitext(output)[0]
    return [f"{stem}-{count - 1 - j}.png" for j in range(count)]


def run_compress(img, compressor, output):
    meta = compressor.compress(img)
    if meta['threshold'] is not None:
        print(f"Threshold: {meta['threshold']:.6f}")
    save_image(meta['image'], output)
    print(f"Discarded {meta['zeroed']} of {meta['coefficients']} coefficients "
          f"({discarded_fraction(meta):.1%}), PSNR {psnr(img, meta['image']):.2f} dB")
    print("Compressed image saved to:", output)
    return meta


def run_progressive(img, output):
    stages = Compressor().progressive(img)
    paths = progressive_names(output, len(stages))
    for stage, path in zip(stages, paths):
        save_image(stage, path)
    print(f"Progressive images saved: {len(stages)} stages, "
          f"{paths[-1]} (coarsest) .. {paths[0]} (finest)")
    return stages, paths


def _build_arg_parser():
    parser = argparse.ArgumentParser(
        description="Haar wavelet image compressor (single ratio or progressive).",
        allow_abbrev=False,
    )
    parser.add_argument("-i", dest="input", required=True,
                        help="Input image path (any format Pillow supports)")
    parser.add_argument("-o", dest="output", default=DEFAULT_OUTPUT,
                        help=f"Output image path (default: {DEFAULT_OUTPUT})")
    parser.add_argument("-compress", dest="compress", type=float, metavar="PERCENT",
                        help="Compression ratio in percent [0-100]")
    parser.add_argument("-progressive", dest="progressive", action="store_true",
                        help="Write one image per wavelet level as <output>-<k>.png")
    return parser


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        main_menu()
        return 0

    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    if args.compress is None and not args.progressive:
        parser.error("nothing to do: pass -compress PERCENT and/or -progressive")

    compressor = None
    if args.compress is not None:
        try:
            compressor = Compressor(args.compress / 100)
        except InvalidParameter:
            print("Please provide a valid compression ratio.")
            return 1

    try:
        img = load_image(args.input)
    except (FileNotFoundError, DecodeFailure) as exc:
        print("Error occurred when reading the input image:", exc)
        return 1

    try:
        if compressor is not None:
            run_compress(img, compressor, args.output)
        if args.progressive:
            run_progressive(img, args.output)
    except EncodeFailure as exc:
        print("Error occurred when writing an output image:", exc)
        return 1
    return 0


def cli():
    sys.exit(main())


# ---------- interactive menu ----------

def _ask_image():
    path = input("Enter path to image file: ").strip()
    try:
        img = load_image(path)
    except (FileNotFoundError, DecodeFailure) as exc:
        print(exc)
        return None, None
    print(f"Loaded image {img.width}x{img.height}")
    return path, img


def compress_flow():
    path, img = _ask_image()
    if img is None:
        return

    ratio_str = input("Compression ratio in percent [0-100] (default=50): ").strip()
    try:
        compressor = Compressor(float(ratio_str) / 100 if ratio_str != "" else 0.5)
    except (ValueError, InvalidParameter):
        print("Please provide a valid compression ratio.")
        return

    os.makedirs(OUTPUT_DIR, exist_ok=True)
    base = os.path.splitext(os.path.basename(path))[0]
    out_path = os.path.join(OUTPUT_DIR, f"{base}_compressed.png")
    meta = run_compress(img, compressor, out_path)

    out_name = f"{base}_results.png"
    titles = ["Original", f"Compressed ({meta['ratio']:.0%})"]
    outpath = show_and_save_images([img, meta['image']], titles, out_name=out_name)
    print("Saved visualization to:", outpath)


def progressive_flow():
    path, img = _ask_image()
    if img is None:
        return

    os.makedirs(OUTPUT_DIR, exist_ok=True)
    base = os.path.splitext(os.path.basename(path))[0]
    stages, paths = run_progressive(img, os.path.join(OUTPUT_DIR, base + ".png"))

    side = square_length(max(img.width, img.height))
    titles = []
    active = side * 2
    for stage in stages:
        kept = retained_coefficients(side, active)
        titles.append(f"{kept} coeff/channel, PSNR {psnr(img, stage):.1f} dB")
        active //= 2
    outpath = show_and_save_images([img] + stages, ["Original"] + titles,
                                   out_name=f"{base}_progressive.png")
    print("Saved visualization to:", outpath)


def main_menu():
    while True:
        print("\nHaar Wavelet Compression Menu")
        print("1) Compress image")
        print("2) Progressive compression")
        print("3) Run automated test cases")
        print("4) Exit")
        choice = input("Choose option: ").strip()
        if choice == "1":
            compress_flow()
        elif choice == "2":
            progressive_flow()
        elif choice == "3":
            import test_cases
            test_cases.run_all()
        elif choice == "4":
            print("Bye.")
            break
        else:
            print("Invalid choice.")

if __name__ == "__main__":
    cli()
