from __future__ import annotations

import bcrypt

BCRYPT_ROUNDS = 10


# bcrypt only looks at the first 72 bytes; longer inputs are truncated
# explicitly so that bcrypt>=4.1 does not raise on them.
def _normalize_password_for_bcrypt(password: str) -> bytes:
    pw = (password or "").encode("utf-8")
    if len(pw) <= 72:
        return pw
    return pw[:72]


def hash_password(password: str, *, rounds: int = BCRYPT_ROUNDS) -> str:
    pw = _normalize_password_for_bcrypt(password)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(pw, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        pw = _normalize_password_for_bcrypt(plain_password)
        return bcrypt.checkpw(pw, password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash stored for the user
        return False


def password_looks_hashed(password: str) -> bool:
    return password.startswith(("$2a$", "$2b$", "$2y$"))
