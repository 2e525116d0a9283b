import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from sample_types import available_sample_types, get_sample_type


def test_registry_tags_and_widths():
    widths = {
        "fc64": 16, "fc32": 8, "sc64": 16, "sc32": 8, "sc16": 4, "sc8": 2,
        "f64": 8, "f32": 4, "s64": 8, "s32": 4, "s16": 2, "s8": 1,
    }
    assert set(available_sample_types()) == set(widths)
    for tag, width in widths.items():
        assert get_sample_type(tag).width == width, tag


def test_unknown_tag():
    with pytest.raises(KeyError):
        get_sample_type("u8")


def test_bounds():
    assert get_sample_type("f32").bounds is None
    assert get_sample_type("sc8").bounds == (-128.0, 127.0)
    lo, hi = get_sample_type("s64").bounds
    narrowed = np.array([lo, hi]).astype(np.int64)
    assert narrowed[0] == np.iinfo(np.int64).min
    assert narrowed[1] > 0


def test_complex_float_components_and_compose():
    st = get_sample_type("fc32")
    samples = np.array([1 + 2j, -3 - 4j], dtype=np.complex64)
    comps = st.components(samples)
    np.testing.assert_array_equal(comps, [[1, 2], [-3, -4]])
    restored = st.compose(comps.astype(np.float64))
    assert restored.dtype == np.complex64
    np.testing.assert_array_equal(restored, samples)


def test_complex_integer_layout():
    st = get_sample_type("sc16")
    raw = np.array([1, -1, 2, -2, 3, -3], dtype=np.int16).tobytes()
    samples = st.frombuffer(raw)
    assert samples.shape == (3, 2)
    assert st.shape(5) == (5, 2)


def test_components_rejects_wrong_dtype_and_shape():
    st = get_sample_type("s16")
    with pytest.raises(TypeError):
        st.components(np.zeros(4, dtype=np.float32))
    with pytest.raises(ValueError):
        st.components(np.zeros((4, 2), dtype=np.int16))


def test_integer_narrowing_truncates():
    st = get_sample_type("s16")
    np.testing.assert_array_equal(st.compose(np.array([1.9, -1.9, 0.2])), [1, -1, 0])
