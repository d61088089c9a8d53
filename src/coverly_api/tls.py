"""TLS trust configuration for outbound HTTPS calls.

Operators behind an intercepting proxy either supply the proxy CA (as a file
or inline) or switch certificate validation off. ``build_tls_trust`` turns
those settings into a TlsTrustConfig that every upstream client shares.
"""

import base64
import binascii
import logging
import ssl
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off"})

PEM_BEGIN = "-----BEGIN"
PEM_END = "-----END"


def parse_bool_flag(value: object) -> bool | None:
    """Interpret a boolean-like configuration value.

    Args:
        value: A bool, or a string such as "true", "0", "Off"

    Returns:
        True or False for recognised values, None otherwise
    """
    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return None

    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return None


def _is_pem(text: str) -> bool:
    return PEM_BEGIN in text and PEM_END in text


@dataclass(frozen=True)
class TlsTrustConfig:
    """Transport policy applied to an upstream HTTPS client.

    Attributes:
        reject_unauthorized: False when certificate validation is disabled,
            None when left to the platform default
        ca_bundle: Extra trusted CA material, PEM text or raw bytes
    """

    reject_unauthorized: bool | None = None
    ca_bundle: str | bytes | None = None

    @property
    def verification_disabled(self) -> bool:
        return self.reject_unauthorized is False

    def to_httpx_verify(self) -> ssl.SSLContext | bool:
        """Build the ``verify`` argument for an httpx client.

        Returns:
            False when validation is disabled, an SSLContext trusting the CA
            bundle otherwise, or True if the bundle cannot be loaded
        """
        if self.verification_disabled:
            return False
        if self.ca_bundle is None:
            return True

        context = ssl.create_default_context()
        try:
            context.load_verify_locations(cadata=self._cadata())
        except (ssl.SSLError, ValueError) as e:
            logger.error("Could not load the configured CA bundle, using system trust store: %s", e)
            return True
        return context

    def _cadata(self) -> str | bytes:
        bundle = self.ca_bundle
        if isinstance(bundle, bytes):
            try:
                text = bundle.decode("ascii")
            except UnicodeDecodeError:
                return bundle  # DER
            return text if _is_pem(text) else bundle
        return bundle or ""


def _decode_inline_cert(ca_cert: str, label: str) -> str | bytes | None:
    if _is_pem(ca_cert):
        return ca_cert
    try:
        decoded = base64.b64decode(ca_cert.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error("%s inline CA certificate is neither PEM nor base64: %s", label, e)
        return None
    return decoded or None


def _read_ca_file(ca_file: str, label: str) -> bytes | None:
    path = Path(ca_file)
    if not path.is_absolute():
        path = Path.cwd() / path
    try:
        return path.read_bytes()
    except OSError as e:
        logger.error("Failed to read %s CA bundle from %s: %s", label, path, e)
        return None


def build_tls_trust(
    reject_unauthorized: object = None,
    ca_file: str | None = None,
    ca_cert: str | None = None,
    label: str = "upstream",
) -> TlsTrustConfig | None:
    """Build the transport policy from configuration values.

    ``ca_cert`` takes priority over ``ca_file``; only one of them is used.
    A CA file that cannot be read is logged and ignored.

    Args:
        reject_unauthorized: Boolean-like flag; "false" disables validation
        ca_file: Path to a CA bundle, relative to the working directory
        ca_cert: Inline certificate, PEM text or base64
        label: Name of the upstream, used in log messages

    Returns:
        TlsTrustConfig when a CA bundle was loaded or validation was
        disabled, None to keep the platform defaults
    """
    reject = parse_bool_flag(reject_unauthorized)

    ca_bundle: str | bytes | None = None
    if ca_cert:
        ca_bundle = _decode_inline_cert(ca_cert, label)
    elif ca_file:
        ca_bundle = _read_ca_file(ca_file, label)

    if reject is False:
        logger.warning(
            "TLS certificate validation is disabled for %s requests. "
            "Do not use this setting in production.",
            label,
        )

    if ca_bundle is None and reject is not False:
        return None

    return TlsTrustConfig(reject_unauthorized=reject, ca_bundle=ca_bundle)


def httpx_verify(tls: TlsTrustConfig | None) -> ssl.SSLContext | bool:
    """Return the httpx ``verify`` value for an optional policy."""
    if tls is None:
        return True
    return tls.to_httpx_verify()

