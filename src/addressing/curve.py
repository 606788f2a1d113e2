"""
Ed25519 point check.

A derived address is only usable when it is NOT a valid compressed
Ed25519 point: such an address has no private key, so only the program
can act for it.
"""

# Field prime and curve constant of edwards25519
P = 2 ** 255 - 19
D = (-121665 * pow(121666, P - 2, P)) % P


def is_on_curve(candidate: bytes) -> bool:
    """
    Return True if 32 bytes decompress to a point on edwards25519.

    The y coordinate is the little-endian value with the sign bit cleared.
    The point exists iff x^2 = (y^2 - 1) / (d*y^2 + 1) has a square root.
    """
    if len(candidate) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(candidate)}")

    y = (int.from_bytes(candidate, "little") & ((1 << 255) - 1)) % P
    y2 = y * y % P
    u = (y2 - 1) % P
    v = (D * y2 + 1) % P

    if u == 0:
        return True

    x2 = u * pow(v, P - 2, P) % P
    # Euler's criterion
    return pow(x2, (P - 1) // 2, P) == 1
