"""Constants for the anchor codec."""

# ============================================================================
# DISCRIMINATORS
# ============================================================================

DISCRIMINATOR_SIZE = 8

ACCOUNT_NAMESPACE = "account"
INSTRUCTION_NAMESPACE = "global"
EVENT_NAMESPACE = "event"

# ============================================================================
# BORSH LAYOUT
# ============================================================================

PUBKEY_SIZE = 32
LENGTH_PREFIX_SIZE = 4
OPTION_TAG_SIZE = 1
ENUM_TAG_SIZE = 1

# Allocation used by the reference client when sizing variable-length accounts
DEFAULT_VARIABLE_ACCOUNT_SIZE = 1000

# ============================================================================
# PDA DERIVATION
# ============================================================================

PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEED_LENGTH = 32
MAX_SEEDS = 16
MAX_BUMP = 255
DEFAULT_NUMBER_SEED_WIDTH = 8

# ============================================================================
# CACHES
# ============================================================================

DEFAULT_CACHE_SIZE = 1000
