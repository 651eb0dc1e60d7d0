from typing import Optional


def normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    normalized = email.strip().lower()
    return normalized or None


def resolve_trainer_id(
    customer_id: Optional[str], email: Optional[str]
) -> Optional[str]:
    """Stable trainer key: platform customer id, else normalized email."""
    if customer_id and customer_id.strip():
        return customer_id.strip()
    return normalize_email(email)
