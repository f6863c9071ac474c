#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core functionality for SubnetCalc - IPv4 subnet calculations.

Pure octet arithmetic for network calculations without external dependencies.
Every public function is stateless; results depend only on the arguments.
"""
import enum
import functools
import logging
import os
import re
import sys
import time
import typing


# Global configuration
DEBUG_MODE = os.environ.get('SUBNETCALC_DEBUG', '').lower() in ('true', '1')


# Configure logging with dynamic level
def setup_logging(debug: bool = False) -> None:
    """Setup logging with optional debug mode."""
    global DEBUG_MODE
    DEBUG_MODE = debug

    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        handlers=[logging.StreamHandler(sys.stderr)],
        level=level,
        format='%(asctime)s.%(msecs)03d [%(levelname)s]: (%(name)s.%(funcName)s) - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True
    )


setup_logging(DEBUG_MODE)
logger = logging.getLogger(__name__)

OCTET_COUNT = 4
MAX_PREFIX = 32

_DIGITS_RE = re.compile(r'[0-9]+')


def debug_log(func):
    """Decorator for debug logging with timing."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if DEBUG_MODE:
            start_time = time.time()
            logger.debug(f"Entering {func.__name__} with args={args}, kwargs={kwargs}")

            try:
                result = func(*args, **kwargs)
                elapsed = (time.time() - start_time) * 1000
                logger.debug(f"Exiting {func.__name__} in {elapsed:.2f}ms with result={result}")
                return result
            except Exception as e:
                elapsed = (time.time() - start_time) * 1000
                logger.debug(f"Exception in {func.__name__} after {elapsed:.2f}ms: {e}")
                raise
        else:
            return func(*args, **kwargs)
    return wrapper


class ValidationError(ValueError):
    """Input could not be turned into an address/prefix pair."""


class InvalidFormat(ValidationError):
    """Address, netmask or CIDR text is not four dotted octets in range."""


class PrefixOutOfRange(ValidationError):
    """Prefix is not an integer in [0, 32]."""


class IPv4Address(tuple):
    """Immutable four-octet IPv4 address; equality is element-wise."""

    __slots__ = ()

    def __new__(cls, octets: typing.Iterable[int]) -> "IPv4Address":
        octets = tuple(octets)
        if len(octets) != OCTET_COUNT:
            raise InvalidFormat(f"Expected {OCTET_COUNT} octets, got {len(octets)}: {octets}")
        for octet in octets:
            # bool is an int subclass but never a valid octet
            if isinstance(octet, bool) or not isinstance(octet, int) or not 0 <= octet <= 255:
                raise InvalidFormat(f"Octet out of range [0-255]: {octet!r}")
        return super().__new__(cls, octets)

    def __str__(self) -> str:
        return '.'.join(str(octet) for octet in self)

    def __repr__(self) -> str:
        return f"IPv4Address('{self}')"


class Subnet(typing.NamedTuple):
    address: IPv4Address
    prefix: int

    def __str__(self) -> str:
        return f"{self.address}/{self.prefix}"


class UsableRange(typing.NamedTuple):
    first: IPv4Address
    last: IPv4Address


class IPClass(enum.Enum):
    A = 'A'
    B = 'B'
    C = 'C'
    D = 'D (Multicast)'
    E = 'E (Reserved)'
    INVALID = 'Invalid'


class AddressScope(enum.Enum):
    PRIVATE = 'Private'
    PUBLIC = 'Public'


# First-octet ranges, inclusive. 0 and 127 are deliberately absent.
_CLASS_TABLE = (
    (1, 126, IPClass.A),
    (128, 191, IPClass.B),
    (192, 223, IPClass.C),
    (224, 239, IPClass.D),
    (240, 255, IPClass.E),
)


class SubnetReport(typing.NamedTuple):
    """
    Every derived property of a subnet.

    usable_range is None for /31 and /32, in which case available_hosts is 0.
    """
    address: IPv4Address
    prefix: int
    mask: IPv4Address
    wildcard: IPv4Address
    network: IPv4Address
    broadcast: IPv4Address
    usable_range: typing.Optional[UsableRange]
    available_hosts: int
    total_addresses: int
    ip_class: IPClass
    scope: AddressScope
    binary: typing.Tuple[str, ...]
    mask_binary: typing.Tuple[str, ...]

    def as_dict(self) -> typing.Dict[str, typing.Any]:
        """Flatten the report into JSON-ready values."""
        return {
            "address": str(self.address),
            "network": str(self.network),
            "prefix": f"/{self.prefix}",
            "netmask": str(self.mask),
            "wildcard": str(self.wildcard),
            "broadcast": str(self.broadcast),
            "hostmin": str(self.usable_range.first) if self.usable_range else None,
            "hostmax": str(self.usable_range.last) if self.usable_range else None,
            "hosts": self.available_hosts,
            "total": self.total_addresses,
            "class": self.ip_class.value,
            "type": self.scope.value,
            "binary": '.'.join(self.binary),
            "netmask_binary": '.'.join(self.mask_binary),
        }


@debug_log
def parse_address(text: str) -> IPv4Address:
    """Parse dotted-quad text strictly or raise InvalidFormat."""
    if not isinstance(text, str):
        raise InvalidFormat(f"Invalid IP address: {text!r}")

    segments = text.split('.')
    if len(segments) != OCTET_COUNT:
        raise InvalidFormat(f"Invalid IP address: '{text}' (expected {OCTET_COUNT} dotted octets)")

    octets = []
    for segment in segments:
        if not _DIGITS_RE.fullmatch(segment):
            raise InvalidFormat(f"Invalid IP address: '{text}' (octet '{segment}' is not a number)")
        value = int(segment, 10)
        if value > 255:
            raise InvalidFormat(f"Invalid IP address: '{text}' (octet {value} out of range [0-255])")
        octets.append(value)

    return IPv4Address(octets)


@debug_log
def parse_prefix(value: typing.Union[int, str]) -> int:
    """
    Validate a CIDR prefix (0-32) and return it as int.

    Text is accepted for callers reading user input, with an optional
    leading '/', but only as plain decimal digits.

    Raises:
        PrefixOutOfRange: for anything that is not an integer in [0, 32]
    """
    if isinstance(value, bool):
        raise PrefixOutOfRange(f"Invalid prefix: {value!r}")

    if isinstance(value, str):
        text = value[1:] if value.startswith('/') else value
        if not _DIGITS_RE.fullmatch(text):
            raise PrefixOutOfRange(f"Invalid prefix: '{value}' (must be an integer between 0 and {MAX_PREFIX})")
        value = int(text, 10)

    if not isinstance(value, int):
        raise PrefixOutOfRange(f"Invalid prefix: {value!r}")

    if not 0 <= value <= MAX_PREFIX:
        raise PrefixOutOfRange(f"Invalid prefix: {value} (must be between 0 and {MAX_PREFIX})")

    return value


@debug_log
def prefix_from_mask(text: str) -> int:
    """Convert a dotted netmask to its prefix length."""
    try:
        mask = parse_address(text)
    except InvalidFormat as exc:
        raise InvalidFormat(f"Invalid netmask: '{text}'") from exc

    # Must be consecutive 1s followed by 0s
    bits = ''.join(to_binary_octet(octet) for octet in mask)
    if '01' in bits:
        raise InvalidFormat(f"Invalid netmask: '{text}' (bits are not contiguous)")

    return bits.count('1')


@debug_log
def parse_cidr(cidr_str: str) -> typing.Tuple[IPv4Address, int]:
    """
    Parse CIDR notation (e.g., "192.168.1.1/24") into address and prefix.

    Raises:
        InvalidFormat: if the text or the address part is malformed
        PrefixOutOfRange: if the prefix part is not in [0, 32]
    """
    if not cidr_str:
        raise InvalidFormat("Empty input. Please provide an address in CIDR format (e.g., 192.168.1.1/24)")

    if '/' not in cidr_str:
        raise InvalidFormat(f"Missing '/' separator. Expected format: IP/PREFIX (e.g., 192.168.1.1/24), got: {cidr_str}")

    parts = cidr_str.split('/')
    if len(parts) != 2:
        raise InvalidFormat(f"Invalid format. Expected exactly one '/' separator, got: {cidr_str}")

    ip_part, prefix_part = parts
    if not ip_part:
        raise InvalidFormat("IP address part is empty. Expected format: IP/PREFIX (e.g., 192.168.1.1/24)")
    if not prefix_part:
        raise InvalidFormat("Prefix part is empty. Expected format: IP/PREFIX (e.g., 192.168.1.1/24)")

    return parse_address(ip_part), parse_prefix(prefix_part)


@debug_log
def compute_mask(prefix: int) -> IPv4Address:
    """Build the contiguous subnet mask for a prefix."""
    prefix = parse_prefix(prefix)
    full_octets, remaining_bits = divmod(prefix, 8)
    mask = [0] * OCTET_COUNT

    for i in range(full_octets):
        mask[i] = 255

    if remaining_bits > 0:
        mask[full_octets] = 256 - 2 ** (8 - remaining_bits)

    return IPv4Address(mask)


def compute_wildcard(mask: IPv4Address) -> IPv4Address:
    """Inverted mask (Cisco-style wildcard)."""
    return IPv4Address(255 - octet for octet in mask)


@debug_log
def compute_network_address(address: IPv4Address, mask: IPv4Address) -> IPv4Address:
    return IPv4Address(octet & mask_octet for octet, mask_octet in zip(address, mask))


@debug_log
def compute_broadcast_address(address: IPv4Address, mask: IPv4Address) -> IPv4Address:
    return IPv4Address(octet | (255 - mask_octet) for octet, mask_octet in zip(address, mask))


@debug_log
def compute_usable_range(network: IPv4Address, broadcast: IPv4Address,
                         prefix: int) -> typing.Optional[UsableRange]:
    """
    First and last assignable host addresses.

    Returns None for /31 and /32, which have no host between the network
    and broadcast addresses. For /30 and wider the last octet of the network
    address has its two low bits clear and the broadcast has them set, so
    stepping the last octet never carries into the third.
    """
    prefix = parse_prefix(prefix)
    if prefix >= MAX_PREFIX - 1:
        return None

    first = IPv4Address(network[:3] + (network[3] + 1,))
    last = IPv4Address(broadcast[:3] + (broadcast[3] - 1,))
    return UsableRange(first, last)


def compute_total_addresses(prefix: int) -> int:
    prefix = parse_prefix(prefix)
    return 2 ** (MAX_PREFIX - prefix)


@debug_log
def compute_available_hosts(prefix: int) -> int:
    """Usable host count; /31 and /32 report 0 instead of a negative number."""
    return max(compute_total_addresses(prefix) - 2, 0)


@debug_log
def classify(first_octet: int) -> IPClass:
    """Classful network class of an address by its first octet."""
    if isinstance(first_octet, bool) or not isinstance(first_octet, int) or not 0 <= first_octet <= 255:
        raise InvalidFormat(f"Octet out of range [0-255]: {first_octet!r}")
    for low, high, ip_class in _CLASS_TABLE:
        if low <= first_octet <= high:
            return ip_class
    return IPClass.INVALID


@debug_log
def is_private(octets: typing.Sequence[int]) -> bool:
    """
    RFC 1918 membership check.

    Loopback, link-local and shared (CGNAT) space are reported as public.
    """
    first, second = octets[0], octets[1]
    return (
        first == 10
        or (first == 172 and 16 <= second <= 31)
        or (first == 192 and second == 168)
    )


def scope(octets: typing.Sequence[int]) -> AddressScope:
    return AddressScope.PRIVATE if is_private(octets) else AddressScope.PUBLIC


def to_binary_octet(n: int) -> str:
    """Zero-padded 8-bit string of an octet."""
    if isinstance(n, bool) or not isinstance(n, int) or not 0 <= n <= 255:
        raise InvalidFormat(f"Octet out of range [0-255]: {n!r}")
    return format(n, '08b')


def to_binary(address: IPv4Address) -> str:
    return '.'.join(to_binary_octet(octet) for octet in address)


def build_report(subnet: Subnet) -> SubnetReport:
    address, prefix = subnet
    mask = compute_mask(prefix)
    network = compute_network_address(address, mask)
    broadcast = compute_broadcast_address(address, mask)

    return SubnetReport(
        address=address,
        prefix=prefix,
        mask=mask,
        wildcard=compute_wildcard(mask),
        network=network,
        broadcast=broadcast,
        usable_range=compute_usable_range(network, broadcast, prefix),
        available_hosts=compute_available_hosts(prefix),
        total_addresses=compute_total_addresses(prefix),
        ip_class=classify(address[0]),
        scope=scope(address),
        binary=tuple(to_binary_octet(octet) for octet in address),
        mask_binary=tuple(to_binary_octet(octet) for octet in mask),
    )


@debug_log
def calculate(address_text: str, prefix: typing.Union[int, str]) -> SubnetReport:
    """
    Core subnet computation.

    Args:
        address_text: IPv4 address in dotted-quad notation
        prefix: CIDR prefix (0-32)

    Returns:
        SubnetReport with mask, network, broadcast, usable range,
        host counts, class, scope and binary renderings

    Raises:
        InvalidFormat: if the address does not parse
        PrefixOutOfRange: if the prefix is not in [0, 32]
    """
    # Both inputs are validated before anything is derived
    subnet = Subnet(parse_address(address_text), parse_prefix(prefix))
    if DEBUG_MODE:
        logger.debug(f"Calculating subnet {subnet}")
    return build_report(subnet)


@debug_log
def calculate_cidr(cidr_str: str) -> SubnetReport:
    """Compute a report from CIDR notation (e.g., "192.168.1.1/24")."""
    return build_report(Subnet(*parse_cidr(cidr_str)))
