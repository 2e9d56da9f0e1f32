"""Launch options: idle timeouts, connection methods and subnet choices."""

from __future__ import annotations

import re
from enum import Enum

_DURATION_VALUE = re.compile(r"[+-]?[0-9]+")

_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
}

_AMAZON_LINUX_BASES = frozenset({"amazonlinux2-arm64", "amazonlinux2-x86_64"})


class ConnectionMethod(str, Enum):
    """How the workstation reaches the instance."""

    SSH = "ssh"
    SESSION_MANAGER = "session-manager"


class SubnetType(str, Enum):
    """Which kind of subnet the instance is placed in."""

    PUBLIC = "public"
    PRIVATE = "private"


def parse_duration(text: str) -> int:
    """Convert a duration such as "3m", "1h" or "4h" to seconds.

    The last character is the unit (s, m, h or d); the rest is an integer.
    """
    text = text.strip()
    if len(text) < 2:
        raise ValueError(f"invalid duration format: {text}")

    unit, value_text = text[-1], text[:-1]
    if not _DURATION_VALUE.fullmatch(value_text):
        raise ValueError(f"invalid duration value: {text}")
    value = int(value_text)

    try:
        return value * _UNIT_SECONDS[unit]
    except KeyError:
        raise ValueError(
            f"invalid duration unit: {unit} (use s, m, h, or d)"
        ) from None


def validate_launch_options(
    connection_method: str, subnet_type: str
) -> tuple[ConnectionMethod, SubnetType]:
    """Check the connection method and subnet type, returning them as enums."""
    try:
        method = ConnectionMethod(connection_method)
    except ValueError:
        raise ValueError(
            f"connection method must be '{ConnectionMethod.SSH.value}' "
            f"or '{ConnectionMethod.SESSION_MANAGER.value}'"
        ) from None
    try:
        subnet = SubnetType(subnet_type)
    except ValueError:
        raise ValueError(
            f"subnet type must be '{SubnetType.PUBLIC.value}' "
            f"or '{SubnetType.PRIVATE.value}'"
        ) from None
    return method, subnet


def launch_warnings(
    connection_method: str, subnet_type: str, create_nat_gateway: bool
) -> list[str]:
    """Return the warning and information lines for a launch configuration."""
    lines: list[str] = []

    if subnet_type == SubnetType.PRIVATE.value and not create_nat_gateway:
        lines.extend(
            [
                "⚠️  Warning: Private subnet without NAT Gateway means limited internet access",
                "   - Package installations may fail",
                "   - Jupyter extensions may not work",
                "   - Consider using --create-nat-gateway for full functionality",
            ]
        )

    if connection_method == ConnectionMethod.SESSION_MANAGER.value:
        lines.append("ℹ️  Using Session Manager connection (no SSH keys needed)")
        if subnet_type == SubnetType.PUBLIC.value:
            lines.append("   - Instance will be in public subnet but without SSH access")

    return lines


def ssh_username(ami_base: str) -> str:
    """Return the login user for an AMI base: ec2-user on Amazon Linux, else ubuntu."""
    return "ec2-user" if ami_base in _AMAZON_LINUX_BASES else "ubuntu"


def region_from_availability_zone(availability_zone: str) -> str:
    """Strip the zone letter from an availability zone, e.g. us-east-1a -> us-east-1."""
    return availability_zone[:-1] if availability_zone else ""