"""polyphase-resample: rational P/Q resampling of raw sample files."""

import argparse
import logging
import sys

from polyphase_src import PolyphaseResampler
from sample_types import available_sample_types, get_sample_type
from src_config import DEFAULT_SAMPLE_TYPE, VERSION
from src_stream import resample_stream


def _positive_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be strictly positive: {value}")
    return value


def build_parser():
    sample_types = "\n".join(
        f"  {tag:>4} - {desc}" for tag, desc in available_sample_types().items()
    )
    parser = argparse.ArgumentParser(
        prog="polyphase-resample",
        description="Polyphase rational rate resampler for raw sample files",
        epilog=f"Sample Types:\n{sample_types}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-i", "--ifile", required=True, help="Input file")
    parser.add_argument("-o", "--ofile", required=True, help="Output file")
    parser.add_argument("-p", "--numerator", dest="p", type=_positive_int, required=True,
                        help="Rational rate numerator 'P'")
    parser.add_argument("-q", "--denominator", dest="q", type=_positive_int, required=True,
                        help="Rational rate denominator 'Q'")
    parser.add_argument("-t", "--sampletype", default=DEFAULT_SAMPLE_TYPE,
                        choices=list(available_sample_types()), metavar="TYPE",
                        help=f"Sample type (default: {DEFAULT_SAMPLE_TYPE})")
    parser.add_argument("--taps", type=_positive_int,
                        help="Taps per phase (default: 384 complex, 128 real)")
    parser.add_argument("--plot-response", metavar="PNG",
                        help="Save the prototype filter response plot")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-v", "--version", action="version",
                        version=f"resample version-{VERSION}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    sample_type = get_sample_type(args.sampletype)
    try:
        resampler = PolyphaseResampler(args.p, args.q, taps=args.taps, sample_type=sample_type)
        if args.plot_response:
            from src_analysis import plot_frequency_response
            plot_frequency_response(resampler, args.plot_response)

        with open(args.ifile, "rb") as istr, open(args.ofile, "wb") as ostr:
            written = resample_stream(istr, ostr, resampler)
    except (OSError, ValueError) as exc:
        print(f"polyphase-resample: {exc}", file=sys.stderr)
        return 1

    print(
        f"Wrote {written} '{sample_type.description}' samples "
        f"({written * sample_type.width} bytes) to file {args.ofile}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
