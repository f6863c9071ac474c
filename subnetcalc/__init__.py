#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SubnetCalc - IPv4 subnet calculator library with a CLI.

Computes subnet mask, network and broadcast addresses, usable host range,
classful network class, private/public scope and binary renderings from
an IPv4 address and CIDR prefix.
"""

__version__ = "0.1.0"
__author__ = 'SubnetCalc contributors'

# Import modules
from . import core
from . import cli

from .core import (
    AddressScope,
    InvalidFormat,
    IPClass,
    IPv4Address,
    PrefixOutOfRange,
    Subnet,
    SubnetReport,
    UsableRange,
    ValidationError,
    calculate,
    calculate_cidr,
)

__all__ = [
    "__version__",
    "__author__",
    "core",
    "cli",
    "AddressScope",
    "InvalidFormat",
    "IPClass",
    "IPv4Address",
    "PrefixOutOfRange",
    "Subnet",
    "SubnetReport",
    "UsableRange",
    "ValidationError",
    "calculate",
    "calculate_cidr",
]
