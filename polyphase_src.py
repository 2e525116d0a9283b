"""
Polyphase Rational Sample-Rate Converter
Single-stage P/Q polyphase SRC with a Blackman-Harris windowed-sinc prototype

References:
- Crochiere, R., & Rabiner, L. (1983). Multirate Digital Signal Processing
- Harris, F. J. (1978). "On the use of windows for harmonic analysis with the
  discrete Fourier transform." Proc. IEEE 66(1)
"""

import logging

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view
from scipy.signal import windows

from sample_types import get_sample_type
from src_config import (
    BLACKMAN_HARRIS,
    DEFAULT_COMPLEX_TAPS,
    DEFAULT_PATH_LEN,
    DEFAULT_REAL_TAPS,
)

logger = logging.getLogger(__name__)


def design_prototype(p, q, taps):
    """
    Design the low-pass prototype filter.

    The sinc is stretched by the larger rate factor so the cutoff sits at the
    lower of the input and output Nyquist rates, then shaped by a periodic
    Blackman-Harris window over the full length. Taps are normalized so the
    DC gain summed over all ``p`` phases equals ``p``.

    Args:
        p: Interpolation factor (output rate numerator)
        q: Decimation factor (input rate denominator)
        taps: Coefficients per polyphase branch

    Returns:
        proto: float64 array of length ``p * taps``
    """
    n = p * taps
    cutoff = float(max(p, q))

    i = np.arange(n, dtype=np.float64)
    proto = np.sinc((i - n / 2.0) / cutoff)
    proto *= windows.general_cosine(n, BLACKMAN_HARRIS, sym=False)

    return proto * (p / np.sum(proto))


def partition_prototype(proto, p):
    """Split the prototype into ``p`` time-reversed polyphase branches."""
    # Row k holds proto[j * p + k] for j = 0..taps-1
    polyphase = proto.reshape(-1, p).T
    return np.ascontiguousarray(polyphase[:, ::-1])


def design_partitions(p, q, taps):
    partitions = partition_prototype(design_prototype(p, q, taps), p)
    partitions.flags.writeable = False
    return partitions


def saturate(acc, sample_type):
    """Clamp accumulated components to the integer range of ``sample_type``."""
    bounds = sample_type.bounds
    if bounds is None:
        return acc
    return np.clip(acc, bounds[0], bounds[1], out=acc)


class PathTable:
    """Grow-only map from output index to (input offset, partition index)."""

    def __init__(self, p, q, size=DEFAULT_PATH_LEN):
        self.p = p
        self.q = q
        self.offsets = np.empty(0, dtype=np.int64)
        self.phases = np.empty(0, dtype=np.int64)
        self.grow(size)

    def __len__(self):
        return len(self.offsets)

    def grow(self, n):
        start = len(self.offsets)
        if n <= start:
            return

        steps = self.q * np.arange(start, n, dtype=np.int64)
        self.offsets = np.concatenate([self.offsets, steps // self.p])
        self.phases = np.concatenate([self.phases, steps % self.p])
        logger.debug("Path table grown from %d to %d entries", start, n)

    def lookup(self, n):
        return self.offsets[:n], self.phases[:n]


def _positive_int(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"{name} must be strictly positive, got {value}")
    return int(value)


class PolyphaseResampler:
    """
    Streaming P/Q resampler for one sample type.

    Each output sample selects one polyphase branch and one window of input
    samples from a precomputed path, so only ``taps`` multiply-accumulates
    are spent per output. The last ``taps - 1`` input samples are carried to
    the next call, so a signal split into blocks resamples exactly as the
    whole signal would.
    """

    def __init__(self, p, q, taps=None, sample_type="f32"):
        self.sample_type = get_sample_type(sample_type)
        if taps is None:
            taps = DEFAULT_COMPLEX_TAPS if self.sample_type.is_complex else DEFAULT_REAL_TAPS

        self.p = _positive_int("p", p)
        self.q = _positive_int("q", q)
        self.taps = _positive_int("taps", taps)

        # Design prototype and split into polyphase branches
        self.partitions = design_partitions(self.p, self.q, self.taps)
        self.paths = PathTable(self.p, self.q)

        # Delay line for streaming, in component form
        tail = (2,) if self.sample_type.is_complex else ()
        self.history = np.zeros((self.taps - 1,) + tail, dtype=self.sample_type.dtype)

        logger.debug(
            "Designed %d-tap prototype for %d/%d (%s, %d taps per phase)",
            self.p * self.taps, self.p, self.q, self.sample_type.tag, self.taps,
        )

    @property
    def delay(self):
        """Filter group delay in output samples."""
        return self.taps * self.p / (2.0 * self.q)

    def reset(self):
        """Clear the delay line to start a new, unrelated stream."""
        self.history[...] = 0

    def resample(self, input_signal, output=None):
        """
        Resample one block of the stream.

        Args:
            input_signal: Block of ``n * q`` samples, at least ``taps - 1`` long
            output: Optional array of ``n * p`` samples to fill in place

        Returns:
            output: Resampled block of the same sample type

        Raises:
            ValueError: Block sizes do not satisfy the P/Q contract. The
                delay line is left untouched.
        """
        x = self.sample_type.components(input_signal)
        n_in = len(x)
        if output is None:
            n_out = n_in * self.p // self.q
        else:
            self.sample_type.components(output)
            n_out = len(output)
        self._check_sizes(n_in, n_out)
        if n_out == 0:
            if output is None:
                return self.sample_type.compose(np.zeros(x.shape))
            return output

        if n_out > len(self.paths):
            self.paths.grow(n_out)
        offsets, phases = self.paths.lookup(n_out)

        # History followed by input, one window of taps per input position
        extended = np.concatenate([self.history, x]).astype(np.float64)
        frames = sliding_window_view(extended, self.taps, axis=0)

        acc = np.zeros((n_out,) + x.shape[1:], dtype=np.float64)
        for k in range(self.p):
            branch = phases == k
            if np.any(branch):
                acc[branch] = frames[offsets[branch]] @ self.partitions[k]

        self.history = x[n_in - len(self.history):].copy()

        result = self.sample_type.compose(saturate(acc, self.sample_type))
        if output is None:
            return result
        output[...] = result
        return output

    def _check_sizes(self, n_in, n_out):
        if (
            n_in % self.q
            or n_out % self.p
            or n_in // self.q != n_out // self.p
            or n_in < len(self.history)
        ):
            raise ValueError(
                f"Invalid vector size(s): input={n_in}, output={n_out} "
                f"for ratio {self.p}/{self.q} with {self.taps} taps"
            )
