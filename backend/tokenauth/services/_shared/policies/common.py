import hashlib
import hmac


def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    if actor_id is None or owner_id is None:
        return False
    return str(actor_id) == str(owner_id)


def password_fingerprint(password_hash: str) -> str:
    """
    Derive the token fingerprint from a stored password hash.

    Every issued token embeds this value; changing the password changes the
    hash, and with it the fingerprint, so older tokens stop matching.
    """
    return hashlib.sha256(password_hash.encode("utf-8")).hexdigest()[:32]


def fingerprints_match(presented: str | None, current: str) -> bool:
    """Constant-time comparison of a token fingerprint with the current one."""
    if not presented:
        return False
    return hmac.compare_digest(presented, current)
