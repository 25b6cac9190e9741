import hashlib


def derive_org_id(org_name, office_code, official_reference):
    """
    Stable identifier for a government organization.

    SHA-256 over the concatenated inputs, first 16 hex characters,
    upper-cased. Any change to any input yields a different id.
    """
    raw = f"{org_name}{office_code}{official_reference}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16].upper()
