import os
import sys

import numpy as np

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from polyphase_src import design_partitions, design_prototype, partition_prototype


def _reference_prototype(p, q, taps):
    n = p * taps
    a = (0.35875, 0.48829, 0.14128, 0.01168)
    proto = np.empty(n)
    for i in range(n):
        x = (i - n / 2.0) / max(p, q)
        s = 1.0 if x == 0.0 else np.sin(np.pi * x) / (np.pi * x)
        w = (
            a[0]
            - a[1] * np.cos(2 * np.pi * i / n)
            + a[2] * np.cos(4 * np.pi * i / n)
            - a[3] * np.cos(6 * np.pi * i / n)
        )
        proto[i] = s * w
    return proto * (p / proto.sum())


def test_prototype_matches_windowed_sinc():
    for p, q, taps in [(1, 1, 16), (3, 2, 32), (2, 5, 24), (7, 4, 128)]:
        np.testing.assert_allclose(
            design_prototype(p, q, taps), _reference_prototype(p, q, taps), rtol=1e-10, atol=1e-14
        )


def test_partition_shape_and_dc_gain():
    for p, q, taps in [(1, 1, 16), (3, 2, 64), (7, 4, 128), (2, 7, 48)]:
        partitions = design_partitions(p, q, taps)
        assert partitions.shape == (p, taps)
        assert np.isclose(partitions.sum(), p, rtol=1e-12), f"DC gain {partitions.sum()} != {p}"


def test_each_phase_has_unity_gain():
    partitions = design_partitions(4, 3, 64)
    np.testing.assert_allclose(partitions.sum(axis=1), np.ones(4), rtol=1e-3)


def test_partitions_are_reversed_deinterleaved_prototype():
    proto = design_prototype(5, 3, 20)
    partitions = partition_prototype(proto, 5)
    for k in range(5):
        np.testing.assert_array_equal(partitions[k][::-1], proto[k::5])


def test_partitions_are_read_only():
    partitions = design_partitions(3, 2, 16)
    assert not partitions.flags.writeable
