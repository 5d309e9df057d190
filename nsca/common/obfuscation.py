"""
NSCA Obfuscation Module
Reversible XOR obfuscation of packets.
"""

from typing import Optional, Union

from .constants import IV_SIZE
from .proto import ObfuscationMethod
from ..exceptions import UnsupportedObfuscationMethodError


def _xor_cycle(buffer: bytearray, key: bytes) -> None:
    """XOR buffer in place with key, cycling the key from index 0."""
    key_len = len(key)
    for i in range(len(buffer)):
        buffer[i] ^= key[i % key_len]


def transform(
    method: Union[ObfuscationMethod, int],
    buffer: bytes,
    iv: bytes,
    secret: Optional[Union[str, bytes]] = None,
) -> bytes:
    """
    Obfuscate a packet buffer.

    XOR is self-inverse: applying the same transform twice with the same
    IV and secret returns the original buffer.

    Args:
        method: Obfuscation method
        buffer: Packet bytes (checksum already filled in)
        iv: Initialization vector received in the handshake
        secret: Optional shared secret, only used by XOR

    Returns:
        Transformed copy of the buffer

    Raises:
        UnsupportedObfuscationMethodError: If method is unknown
    """
    try:
        method = ObfuscationMethod(method)
    except ValueError:
        raise UnsupportedObfuscationMethodError(method) from None

    if method == ObfuscationMethod.NONE:
        return bytes(buffer)

    if len(iv) != IV_SIZE:
        raise ValueError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")

    data = bytearray(buffer)

    # IV pass must precede the secret pass
    _xor_cycle(data, iv)

    if secret:
        key = secret.encode('utf-8') if isinstance(secret, str) else bytes(secret)
        _xor_cycle(data, key)

    return bytes(data)
