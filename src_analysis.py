"""Filter and cost analysis for a configured resampler."""

import numpy as np
import matplotlib.pyplot as plt
from scipy import signal


def prototype_filter(resampler):
    """Re-interleave the time-reversed partitions into the prototype filter."""
    return resampler.partitions[:, ::-1].T.reshape(-1)


def frequency_response(resampler, worN=8192):
    """
    Frequency response of the prototype filter

    Frequencies are in units of the input sample rate, so the cutoff lands at
    ``min(1, p/q) / 2``. Magnitudes are divided by ``p`` for unity DC gain.

    Returns:
        freqs, response: arrays of length ``worN``
    """
    freqs, response = signal.freqz(
        prototype_filter(resampler), worN=worN, fs=float(resampler.p)
    )
    return freqs, response / resampler.p


def cutoff_frequency(resampler):
    return min(1.0, resampler.p / resampler.q) / 2.0


def plot_frequency_response(resampler, path, worN=8192):
    """Save magnitude and passband-detail plots of the prototype to ``path``."""
    freqs, response = frequency_response(resampler, worN)
    magnitude_db = 20 * np.log10(np.maximum(np.abs(response), 1e-12))
    cutoff = cutoff_frequency(resampler)

    fig, axes = plt.subplots(1, 2, figsize=(15, 5))

    axes[0].plot(freqs, magnitude_db)
    axes[0].set_title(f'{resampler.p}/{resampler.q} Prototype Magnitude Response')
    axes[0].set_xlabel('Frequency (x input rate)')
    axes[0].set_ylabel('Magnitude (dB)')
    axes[0].grid(True)
    axes[0].axvline(cutoff, color='r', linestyle='--', label='Cutoff')
    axes[0].legend()

    passband_idx = freqs <= 0.8 * cutoff
    axes[1].plot(freqs[passband_idx], magnitude_db[passband_idx])
    axes[1].set_title('Passband Detail')
    axes[1].set_xlabel('Frequency (x input rate)')
    axes[1].set_ylabel('Magnitude (dB)')
    axes[1].grid(True)
    axes[1].set_ylim([-0.1, 0.1])

    fig.tight_layout()
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)


def computational_complexity(resampler, n_input):
    """Compare polyphase MACs against zero-stuffing followed by full-rate filtering."""
    n_output = n_input * resampler.p // resampler.q
    proto_len = resampler.p * resampler.taps

    polyphase_macs = n_output * resampler.taps
    direct_macs = n_input * resampler.p * proto_len

    return {
        'output_samples': n_output,
        'macs_per_output': resampler.taps,
        'polyphase_macs': polyphase_macs,
        'direct_macs': direct_macs,
        'reduction': direct_macs / polyphase_macs if polyphase_macs else float('inf'),
    }


def memory_usage(resampler):
    coeff_memory = resampler.partitions.nbytes
    path_memory = resampler.paths.offsets.nbytes + resampler.paths.phases.nbytes
    history_memory = resampler.history.nbytes

    total_memory = coeff_memory + path_memory + history_memory

    return {
        'coefficients_bytes': coeff_memory,
        'path_table_bytes': path_memory,
        'history_bytes': history_memory,
        'total_bytes': total_memory,
        'total_kb': total_memory / 1024,
    }
