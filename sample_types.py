"""Sample type registry: textual tags bound to numpy element types.

Each tag (``"fc32"``, ``"s16"``, ...) names one element type the resampler
can run on. Real types are plain 1-D arrays of their dtype. Complex floating
types use numpy's ``complex64``/``complex128``. Numpy has no complex integer
dtype, so complex integer samples are ``(n, 2)`` arrays holding interleaved
I/Q components, which is also their on-disk layout.
"""

from dataclasses import dataclass

import numpy as np

_COMPLEX_FLOAT = {
    np.dtype(np.float32): np.dtype(np.complex64),
    np.dtype(np.float64): np.dtype(np.complex128),
}


@dataclass(frozen=True)
class SampleType:
    tag: str
    description: str
    dtype: np.dtype
    is_complex: bool

    @property
    def is_integer(self):
        return np.issubdtype(self.dtype, np.integer)

    @property
    def width(self):
        """Bytes per sample (both components for complex types)."""
        return self.dtype.itemsize * (2 if self.is_complex else 1)

    @property
    def array_dtype(self):
        if self.is_complex and not self.is_integer:
            return _COMPLEX_FLOAT[self.dtype]
        return self.dtype

    @property
    def full_scale(self):
        return float(np.iinfo(self.dtype).max) if self.is_integer else 1.0

    @property
    def bounds(self):
        """Saturation bounds as doubles, or None for floating types.

        The upper bound of 64-bit types is not representable as a double, so
        it is pulled down to the largest double that still narrows in range.
        """
        if not self.is_integer:
            return None
        info = np.iinfo(self.dtype)
        lo, hi = float(info.min), float(info.max)
        if hi > info.max:
            hi = float(np.nextafter(hi, 0.0))
        return lo, hi

    def shape(self, n):
        if self.is_complex and self.is_integer:
            return (n, 2)
        return (n,)

    def frombuffer(self, buf):
        samples = np.frombuffer(buf, dtype=self.array_dtype)
        if self.is_complex and self.is_integer:
            samples = samples.reshape(-1, 2)
        return samples

    def components(self, samples):
        """Return ``samples`` as a ``(n,)`` or ``(n, 2)`` component array."""
        arr = np.asarray(samples)
        if arr.ndim == 0:
            raise ValueError(f"{self.tag} samples must be an array, got a scalar")
        if arr.dtype != self.array_dtype:
            raise TypeError(
                f"{self.tag} samples must be {self.array_dtype}, got {arr.dtype}"
            )
        if arr.shape != self.shape(len(arr)):
            raise ValueError(
                f"{self.tag} samples must have shape {self.shape(len(arr))}, got {arr.shape}"
            )
        if self.is_complex and not self.is_integer:
            return np.ascontiguousarray(arr).view(self.dtype).reshape(-1, 2)
        return arr

    def compose(self, acc):
        """Narrow float64 components back to a sample array of this type.

        Integer narrowing truncates toward zero. Callers saturate first.
        """
        with np.errstate(over="ignore", invalid="ignore"):
            narrowed = acc.astype(self.dtype)
        if self.is_complex and not self.is_integer:
            return np.ascontiguousarray(narrowed).view(self.array_dtype)[:, 0]
        return narrowed


_SAMPLE_TYPES = {
    st.tag: st
    for st in (
        SampleType("fc64", "complex double", np.dtype(np.float64), True),
        SampleType("fc32", "complex float", np.dtype(np.float32), True),
        SampleType("sc64", "complex long", np.dtype(np.int64), True),
        SampleType("sc32", "complex int", np.dtype(np.int32), True),
        SampleType("sc16", "complex short", np.dtype(np.int16), True),
        SampleType("sc8", "complex char", np.dtype(np.int8), True),
        SampleType("f64", "double", np.dtype(np.float64), False),
        SampleType("f32", "float", np.dtype(np.float32), False),
        SampleType("s64", "long", np.dtype(np.int64), False),
        SampleType("s32", "int", np.dtype(np.int32), False),
        SampleType("s16", "short", np.dtype(np.int16), False),
        SampleType("s8", "char", np.dtype(np.int8), False),
    )
}


def available_sample_types():
    return {tag: st.description for tag, st in _SAMPLE_TYPES.items()}


def get_sample_type(tag):
    if isinstance(tag, SampleType):
        return tag
    key = str(tag).strip().lower()
    if key not in _SAMPLE_TYPES:
        raise KeyError(
            f"Unknown sample type '{tag}'. Available: {', '.join(_SAMPLE_TYPES)}"
        )
    return _SAMPLE_TYPES[key]
