"""
Hex digests of a text in several algorithms.
"""
import hashlib
from typing import Dict

from veer.exceptions import ValidationError

ALGORITHMS = {
    "SHA1": "sha1",
    "SHA256": "sha256",
    "SHA384": "sha384",
    "SHA512": "sha512",
    "MD5": "md5",
}


def generate_hashes(text: str) -> Dict[str, str]:
    """
    Digest the UTF-8 bytes of ``text`` with every algorithm.

    Raises:
        ValidationError: ``text`` is empty or whitespace
    """
    if not (text or "").strip():
        raise ValidationError("Please enter text to hash", field="text")
    data = text.encode("utf-8")
    return {label: hashlib.new(name, data).hexdigest() for label, name in ALGORITHMS.items()}
