import base64
import binascii


def b64d(value: str) -> bytes:
    """URL-safe base64 decode that tolerates missing padding

    Raises ``ValueError`` for characters outside the URL-safe alphabet.
    """
    pad = "=" * (-len(value) % 4)
    try:
        return base64.b64decode((value + pad).encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"Invalid base64url value: {exc}") from exc
