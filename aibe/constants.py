# ============================
# Encoding
# ============================

# Scalars are written as fixed-width little-endian integers.
SCALAR_BYTES = 32

# Identities are hashed as their utf-8 bytes.
IDENTITY_ENCODING = "utf-8"

# ============================
# Decryption bounds
# ============================

# Plaintexts must lie in [0, bound); BSGS cost grows with sqrt(bound).
DEFAULT_BOUND = 100
DEFAULT_TRANSFER_BOUND = 10000

# ============================
# Files written by the CLI
# ============================

PUBLIC_PARAMS_FILE = "public_params.pkl"
SECRET_KEYS_FILE = "secret_keys.pkl"
