import bcrypt


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (12 rounds, matching the mobile backend)."""
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not hashed or not (hashed.startswith("$2b$") or hashed.startswith("$2a$")):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
