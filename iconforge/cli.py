"""
Convert an image to a multi-size Windows .ico or macOS .icns icon.

Usage:
  iconforge input.png                      -> icon.ico next to the input
  iconforge input.png -o app.icns          -> format taken from the extension
  iconforge https://host/logo.webp -f icns --layers-dir layers/
  iconforge app.ico --inspect              -> print the directory of an icon
"""

import argparse
import logging
import sys
from pathlib import Path

from .errors import IconError
from .formats import ContainerFormat
from .icns import MAGIC as ICNS_MAGIC, read_icns_chunks
from .ico import read_ico_directory
from .pipeline import convert
from .sources import DEFAULT_TIMEOUT, is_url, read_source


def pick_format(args):
    """Format from -f, else from the output extension, else ICO. None if unknown."""
    if args.format:
        return ContainerFormat.parse(args.format)
    if not args.output:
        return ContainerFormat.ICO
    suffix = Path(args.output).suffix
    if suffix.lower() in (".ico", ".icns"):
        return ContainerFormat.parse(suffix)
    return None


def default_output(source, fmt):
    if is_url(source):
        return Path.cwd() / fmt.filename
    return Path(source).expanduser().resolve().parent / fmt.filename


def cmd_convert(args):
    fmt = args.fmt
    output = Path(args.output) if args.output else default_output(args.source, fmt)

    bundle = convert(read_source(args.source, timeout=args.timeout), fmt, workers=args.workers)
    w, h = bundle.source_size
    print(f"Source: {args.source} ({w}x{h})")

    for layer in bundle.layers:
        print(f"  Created {layer.size}x{layer.size}: {len(layer.data)} bytes")

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(bundle.data)
    print(f"\nCreated: {output} ({len(bundle.data)} bytes)")
    sizes = [layer.size for layer in bundle.layers]
    print(f"  {len(sizes)} sizes embedded: {', '.join(f'{s}x{s}' for s in sizes)}")

    if args.layers_dir:
        layers_dir = Path(args.layers_dir)
        layers_dir.mkdir(parents=True, exist_ok=True)
        for layer in bundle.layers:
            (layers_dir / layer.filename).write_bytes(layer.data)
        print(f"  Layer PNGs written to {layers_dir}")


def cmd_inspect(args):
    blob = read_source(args.source, timeout=args.timeout)

    if blob[:4] == ICNS_MAGIC:
        chunks = read_icns_chunks(blob)
        print(f"ICNS: {len(chunks)} chunks, {len(blob)} bytes")
        print(f"{'Type':<6} {'Bytes':>10}")
        print("-" * 17)
        for c in chunks:
            print(f"{c.type_code.decode('ascii', 'replace'):<6} {len(c.data):>10}")
        return

    entries = read_ico_directory(blob)
    print(f"ICO: {len(entries)} images, {len(blob)} bytes")
    print(f"{'Size':<10} {'BPP':>4} {'Bytes':>10} {'Offset':>10}")
    print("-" * 37)
    for e in entries:
        print(f"{f'{e.width}x{e.height}':<10} {e.bpp:>4} {e.size:>10} {e.offset:>10}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="iconforge",
        description="Convert an image to a multi-size .ico or .icns icon",
    )
    parser.add_argument("source", help="Input image path or http(s) URL (PNG, JPEG or WEBP)")
    parser.add_argument("-f", "--format", choices=["ico", "icns"], help="Container format (default: from --output, else ico)")
    parser.add_argument("-o", "--output", help="Output file (default: icon.<ext> next to the input)")
    parser.add_argument("--layers-dir", help="Also write every layer as a standalone PNG here")
    parser.add_argument("--workers", type=int, default=None, help="Resize layers on N threads")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help=f"URL fetch timeout in seconds (default: {DEFAULT_TIMEOUT})")
    parser.add_argument("--inspect", action="store_true", help="Print the directory of an existing .ico/.icns")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.inspect:
        args.fmt = pick_format(args)
        if args.fmt is None:
            parser.error(f"cannot tell the format from {args.output!r}; use .ico/.icns or pass -f")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        if args.inspect:
            cmd_inspect(args)
        else:
            cmd_convert(args)
    except (IconError, OSError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
