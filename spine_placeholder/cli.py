"""Command line entry point.

Usage:
  spine-placeholder --input <path-to-spine.json> [--out <images-dir>] [--overwrite] [--force-version <ver>]
  spine-placeholder <path-to-spine.json> [<images-dir>] [overwrite] [<force-version>]
"""
import argparse
import sys

from .generator import GeneratorOptions, SpineInputError, run

USAGE = """\
Usage:
  spine-placeholder --input <path-to-spine.json> [--out <images-dir>] [--overwrite] [--force-version <ver>]
  spine-placeholder <path-to-spine.json> [<images-dir>] [overwrite] [<force-version>]

Options:
  -i, --input       Path to the Spine JSON file
  -o, --out         Output images directory (defaults to skeleton.images or ./images)
      --overwrite   Overwrite existing images
  -v, --force-version <ver>  Override skeleton.spine version in generated JSON (e.g. 4.3.39-beta)
  -t, --template    Template PNG to copy for every placeholder
                    (defaults to ./dummyPixel/dummyOnePixel.png when present)
  -h, --help        Show this help"""


def build_parser():
    p = argparse.ArgumentParser(prog='spine-placeholder', add_help=False)
    p.add_argument('-h', '--help', action='store_true', dest='help')
    p.add_argument('-i', '--input', default=None)
    p.add_argument('-o', '--out', dest='out_dir', default=None)
    p.add_argument('-v', '--force-version', dest='force_version', default=None)
    p.add_argument('-t', '--template', dest='template', default=None)
    p.add_argument('--overwrite', action='store_true')
    p.add_argument('positional', nargs='*')
    return p


def parse_args(argv=None):
    # unknown flags are ignored rather than treated as errors
    args, _ = build_parser().parse_known_intermixed_args(argv)
    positional = []
    for token in args.positional:
        # `overwrite` may be given as a bare word in positional form
        if token == 'overwrite':
            args.overwrite = True
        else:
            positional.append(token)
    if not args.input and len(positional) > 0:
        args.input = positional[0]
    if not args.out_dir and len(positional) > 1:
        args.out_dir = positional[1]
    if not args.force_version and len(positional) > 2:
        args.force_version = positional[2]
    return args


def print_help():
    print(USAGE)


def main(argv=None):
    args = parse_args(argv)
    if args.help or not args.input:
        print_help()
        return 0

    options = GeneratorOptions(
        input_path=args.input,
        out_dir=args.out_dir,
        overwrite=args.overwrite,
        force_version=args.force_version,
        template_path=args.template,
    )
    try:
        run(options)
    except SpineInputError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"ERROR: Could not prepare output: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
