from .hashing import sha256_hash
from .logger import setup_logging

__all__ = ["sha256_hash", "setup_logging"]
