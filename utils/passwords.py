import bcrypt

# bcrypt only reads the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """
    Hash a password with a fresh bcrypt salt

    Args:
        password: Plaintext password
        rounds: bcrypt cost factor (log2 of the iteration count)

    Returns:
        bcrypt digest, safe to store
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Check a plaintext password against a stored bcrypt digest

    Returns:
        True on match; False on mismatch or an unreadable digest
    """
    try:
        return bcrypt.checkpw(_encode(password), hashed.encode("utf-8"))
    except ValueError:
        return False
