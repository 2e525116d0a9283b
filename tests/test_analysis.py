import os
import sys

import matplotlib

matplotlib.use("Agg")

import numpy as np

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from polyphase_src import PolyphaseResampler, design_prototype
from src_analysis import (
    computational_complexity,
    cutoff_frequency,
    frequency_response,
    memory_usage,
    plot_frequency_response,
    prototype_filter,
)


def test_prototype_round_trip():
    resampler = PolyphaseResampler(3, 2, taps=64, sample_type="f64")
    np.testing.assert_allclose(prototype_filter(resampler), design_prototype(3, 2, 64))


def test_frequency_response_passband_and_stopband():
    resampler = PolyphaseResampler(3, 2, taps=64, sample_type="f64")
    freqs, response = frequency_response(resampler)
    assert cutoff_frequency(resampler) == 0.5
    assert np.isclose(np.abs(response[0]), 1.0)
    passband = freqs <= 0.3
    stopband = freqs >= 0.8
    assert np.all(np.abs(np.abs(response[passband]) - 1.0) < 1e-3)
    assert np.abs(response[stopband]).max() < 1e-3


def test_computational_complexity():
    resampler = PolyphaseResampler(7, 4, taps=128, sample_type="f32")
    cost = computational_complexity(resampler, 4096)
    assert cost["output_samples"] == 7168
    assert cost["macs_per_output"] == 128
    assert cost["polyphase_macs"] == 7168 * 128
    assert cost["reduction"] > 1.0


def test_memory_usage():
    resampler = PolyphaseResampler(3, 2, taps=16, sample_type="fc32")
    usage = memory_usage(resampler)
    assert usage["coefficients_bytes"] == 3 * 16 * 8
    assert usage["history_bytes"] == 15 * 2 * 4
    assert usage["total_bytes"] == (
        usage["coefficients_bytes"] + usage["path_table_bytes"] + usage["history_bytes"]
    )


def test_plot_frequency_response(tmp_path):
    resampler = PolyphaseResampler(2, 3, taps=32, sample_type="f32")
    path = tmp_path / "response.png"
    plot_frequency_response(resampler, path)
    assert path.stat().st_size > 0
