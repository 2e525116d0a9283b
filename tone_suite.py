"""Tone fidelity suite: resample pure tones and compare with ideal tones.

Every case synthesizes a tone at ``TEST_RATE``, resamples it by ``p/q`` and
compares the result with the same tone synthesized directly at the output
rate, after skipping the filter's settling transient.
"""

import argparse
import sys
from dataclasses import dataclass

import numpy as np

from polyphase_src import PolyphaseResampler
from sample_types import available_sample_types, get_sample_type
from src_config import PASS_LIMIT, TEST_AMPLITUDE, TEST_RATE, TEST_SIZE, TEST_TAPS

DEFAULT_FREQS = (2e3, 5e3, 7e3)
DEFAULT_RATIOS = tuple(range(1, 8))


@dataclass
class ToneResult:
    num: int
    freq: float
    tag: str
    p: int
    q: int
    error: float
    passed: bool


def make_tone(freq, rate, n, sample_type, amplitude=TEST_AMPLITUDE):
    """Sine tone (real types) or sine/cosine I/Q tone (complex types) at full scale."""
    st = get_sample_type(sample_type)
    phase = 2.0 * np.pi * freq * np.arange(n) / rate
    scale = st.full_scale * amplitude
    if st.is_complex:
        comps = np.stack([np.sin(phase), np.cos(phase)], axis=1) * scale
    else:
        comps = np.sin(phase) * scale
    return st.compose(comps)


def tone_error(target, output, offset, sample_type):
    """Error of ``output[offset:]`` against ``target``, relative to full scale.

    The summed squared error over both components is square-rooted and
    divided by the number of compared samples.
    """
    st = get_sample_type(sample_type)
    expected = st.components(target).astype(np.float64)
    actual = st.components(output)[offset:].astype(np.float64)
    count = len(actual)
    if count == 0:
        raise ValueError(f"Nothing to compare after skipping {offset} samples")
    diff = expected[:count] - actual
    return float(np.sqrt(np.sum(diff ** 2)) / count / st.full_scale)


def run_tone_test(freq, tag, p, q, taps=TEST_TAPS, rate=TEST_RATE, size=TEST_SIZE, num=0):
    st = get_sample_type(tag)
    n_in = size // q * q
    n_out = n_in * p // q

    tone = make_tone(freq, rate, n_in, st)
    target = make_tone(freq, rate * p / q, n_out, st)

    resampler = PolyphaseResampler(p, q, taps=taps, sample_type=st)
    output = resampler.resample(tone)

    error = tone_error(target, output, taps * p // q // 2, st)
    return ToneResult(num, freq, st.tag, p, q, error, error < PASS_LIMIT)


def run_suite(freqs=DEFAULT_FREQS, tags=None, ratios=DEFAULT_RATIOS, taps=TEST_TAPS):
    tags = list(tags or available_sample_types())
    ratios = list(ratios)
    results = []
    for freq in freqs:
        for tag in tags:
            for p in ratios:
                for q in ratios:
                    results.append(run_tone_test(freq, tag, p, q, taps=taps, num=len(results)))
    return results


def print_result(result):
    print(f"Test Case {result.num}")
    print("==============")
    print(f"  Tone Frequency:    {result.freq:g}")
    print(f"  Sample type:       {result.tag}")
    print(f"  Ratio:             {result.p}/{result.q}")
    print(f"  Error (RMSE):      {result.error:.6g}")
    print(f"  Result:            {'Pass' if result.passed else 'Fail'}")
    print()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Polyphase resampler tone fidelity suite")
    parser.add_argument("-t", "--type", dest="tags", action="append",
                        choices=list(available_sample_types()),
                        help="Sample type to test (repeatable, default: all)")
    parser.add_argument("-r", "--max-ratio", type=int, default=max(DEFAULT_RATIOS),
                        help="Test every P/Q with 1 <= P, Q <= N (default: 7)")
    parser.add_argument("--taps", type=int, default=TEST_TAPS,
                        help=f"Taps per phase (default: {TEST_TAPS})")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print failures and the summary")
    args = parser.parse_args(argv)

    results = run_suite(tags=args.tags, ratios=range(1, args.max_ratio + 1), taps=args.taps)
    for result in results:
        if not args.quiet or not result.passed:
            print_result(result)

    passed = sum(r.passed for r in results)
    print(f"Completed {len(results)} tests: {passed} passed and {len(results) - passed} failed")
    return 0 if passed == len(results) else 1


if __name__ == "__main__":
    sys.exit(main())
