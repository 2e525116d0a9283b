"""Raw sample file streaming: block reader and file-to-file resampling.

Files are headerless binary in the native byte order of one sample type.
Blocks always hold a whole number of Q-groups so every block satisfies the
resampler's size contract. A trailing remainder shorter than one Q-group is
dropped.
"""

import logging

from polyphase_src import PolyphaseResampler
from sample_types import get_sample_type
from src_config import BLOCKSIZE, DEFAULT_SAMPLE_TYPE

logger = logging.getLogger(__name__)


def block_geometry(sample_type, q, taps, blocksize=BLOCKSIZE):
    """Return ``(groups, min_groups)`` for one read.

    ``groups`` Q-groups fit in ``blocksize`` bytes (at least one), raised so a
    block always covers the resampler's ``taps - 1`` history. ``min_groups``
    is the smallest block the resampler accepts.
    """
    group_bytes = sample_type.width * q
    min_groups = -(-(taps - 1) // q)
    groups = max(1, blocksize // group_bytes, min_groups)
    return groups, min_groups


def _read_full(fh, size):
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = fh.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def iter_blocks(fh, sample_type, q, groups, min_groups=1):
    """Yield sample blocks of whole Q-groups read from ``fh``.

    The reader keeps one block in hand so that a final block shorter than
    ``min_groups`` can be appended to the one before it.
    """
    group_bytes = sample_type.width * q
    read_size = groups * group_bytes
    pending = b""

    while True:
        buf = _read_full(fh, read_size)
        usable = len(buf) // group_bytes * group_bytes
        if not usable:
            break
        if pending and usable < min_groups * group_bytes:
            pending += buf[:usable]
            break
        if pending:
            yield sample_type.frombuffer(pending)
        pending = buf[:usable]
        if len(buf) < read_size:
            break

    if pending:
        n_samples = len(pending) // sample_type.width
        if len(pending) < min_groups * group_bytes:
            raise ValueError(
                f"Input holds {n_samples} samples, fewer than the "
                f"{min_groups * q} needed for one resampler block"
            )
        yield sample_type.frombuffer(pending)


def resample_stream(istr, ostr, resampler, blocksize=BLOCKSIZE):
    """Resample everything readable from ``istr`` into ``ostr``.

    Returns the number of samples written.
    """
    sample_type = resampler.sample_type
    groups, min_groups = block_geometry(sample_type, resampler.q, resampler.taps, blocksize)
    logger.info(
        "Streaming %s at %d/%d: %d samples in, %d samples out per block",
        sample_type.tag, resampler.p, resampler.q,
        groups * resampler.q, groups * resampler.p,
    )

    written = 0
    for block in iter_blocks(istr, sample_type, resampler.q, groups, min_groups):
        out = resampler.resample(block)
        ostr.write(out.tobytes())
        written += len(out)
    return written


def resample_file(infile, outfile, p, q, sample_type=DEFAULT_SAMPLE_TYPE, taps=None,
                  blocksize=BLOCKSIZE):
    """Resample a raw sample file by ``p/q`` into ``outfile``.

    Returns the number of samples written.
    """
    resampler = PolyphaseResampler(p, q, taps=taps, sample_type=get_sample_type(sample_type))
    with open(infile, "rb") as istr, open(outfile, "wb") as ostr:
        return resample_stream(istr, ostr, resampler, blocksize)
