import secrets

# Short prefixes per table, so an id tells which entity it belongs to
TYPE_PREFIX = {
    "swipes": "sw",
    "matches": "mt",
}


def generate_random_id(entity: str) -> str:
    """Returns an opaque id: entity prefix + 16 random hex characters."""
    if entity not in TYPE_PREFIX:
        raise ValueError(f"Unknown entity for ID generation: {entity}")
    return f"{TYPE_PREFIX[entity]}_{secrets.token_hex(8)}"
