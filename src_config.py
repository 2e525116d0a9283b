"""Polyphase SRC configuration: filter, streaming and test constants."""

VERSION = "0.1.0"

# ── Filter ───────────────────────────────────────────────────────────────────

DEFAULT_REAL_TAPS = 128       # taps per phase for real sample types
DEFAULT_COMPLEX_TAPS = 384    # taps per phase for complex sample types

# Blackman-Harris (4-term) window coefficients
BLACKMAN_HARRIS = (0.35875, 0.48829, 0.14128, 0.01168)

# Initial precomputed path length, grown at runtime for larger blocks
DEFAULT_PATH_LEN = 128

# ── Streaming ────────────────────────────────────────────────────────────────

BLOCKSIZE = 4096              # bytes per read, rounded to whole Q-groups
DEFAULT_SAMPLE_TYPE = "fc32"

# ── Tone tests ───────────────────────────────────────────────────────────────

TEST_RATE = 1e6
TEST_AMPLITUDE = 0.99
TEST_SIZE = 8192
TEST_TAPS = 128
PASS_LIMIT = 0.005
