"""Content identity hashing for package files."""

import hashlib
from pathlib import Path

DEFAULT_ALGORITHM = "sha256"


def hash_file(path: Path | str, algorithm: str = DEFAULT_ALGORITHM, chunk_size: int = 65536) -> str:
    """Compute hash of a file.

    Args:
        path: Path to the file
        algorithm: Hash algorithm to use
        chunk_size: Size of chunks to read

    Returns:
        Hex digest of the file hash

    Raises:
        OSError: If the file cannot be read
    """
    hasher = hashlib.new(algorithm)
    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)
    return hasher.hexdigest()
