"""Describe what a launch would do without creating any resources."""

from __future__ import annotations

from .environment import Environment
from .launchopts import ConnectionMethod, SubnetType


def _is_ssh(connection_method: str) -> bool:
    return connection_method == ConnectionMethod.SSH.value


def _is_private(subnet_type: str) -> bool:
    return subnet_type == SubnetType.PRIVATE.value


def dry_run_configuration(
    env: Environment,
    actual_region: str,
    profile: str,
    region: str,
    idle_timeout: str,
    connection_method: str,
    subnet_type: str,
    create_nat_gateway: bool,
    key_name: str,
) -> list[str]:
    """Return the lines summarising the configuration a launch would use."""
    lines = [
        f"[DRY RUN] Would launch {env.name} environment on {env.instance_type} "
        f"in region {actual_region}",
        "[DRY RUN] Configuration:",
        f"  - Environment: {env.name}",
        f"  - Instance Type: {env.instance_type}",
        f"  - AMI Base: {env.ami_base}",
        f"  - EBS Volume: {env.ebs_volume_size}GB",
        f"  - Packages: {len(env.packages)} system packages",
        f"  - Pip Packages: {len(env.pip_packages)} python packages",
        f"  - Jupyter Extensions: {len(env.jupyter_extensions)} extensions",
        f"  - Idle Timeout: {idle_timeout}",
        f"  - AWS Profile: {profile}",
        f"  - AWS Region: {actual_region}",
    ]
    if region:
        lines.append(f"  - Region Override: {region}")
    lines.append(f"  - Connection Method: {_text(connection_method)}")
    lines.append(f"  - Subnet Type: {_text(subnet_type)}")
    if create_nat_gateway and _is_private(subnet_type):
        lines.append("  - NAT Gateway: will be created (additional cost)")
    if _is_ssh(connection_method):
        lines.append(f"  - SSH Key Pair: {key_name} (economical reuse)")
    else:
        lines.append("  - Session Manager: IAM role will be created/attached")
    return lines


def _text(value: str) -> str:
    """Plain string form of an option, whether given as text or as an enum."""
    return value.value if isinstance(value, (ConnectionMethod, SubnetType)) else value


def dry_run_actions(
    env: Environment,
    connection_method: str,
    subnet_type: str,
    create_nat_gateway: bool,
    key_name: str,
) -> list[str]:
    """Return the numbered list of actions a launch would perform."""
    ssh = _is_ssh(connection_method)
    steps: list[str] = []

    if ssh:
        steps.append(f"Create/verify SSH key pair ({key_name})")
        steps.append("Create/verify security group (SSH + Jupyter access)")
    else:
        steps.append("Create/verify IAM role for Session Manager")
        steps.append("Create/verify security group (Jupyter access only)")

    if _is_private(subnet_type) and create_nat_gateway:
        steps.append("Create/verify NAT Gateway for internet access")

    steps.append("Generate user data script for environment setup")
    steps.append(
        f"Launch EC2 instance ({env.instance_type}) in {_text(subnet_type)} subnet"
    )
    steps.append("Wait for instance to be running")
    if ssh:
        steps.append("Setup SSH tunnel (port 8888)")
    else:
        steps.append("Setup Session Manager port forwarding (port 8888)")
    steps.append("Save instance state locally")
    steps.append("Display connection information")

    lines = ["[DRY RUN] Would perform these actions:"]
    lines.extend(f"  {number}. {step}" for number, step in enumerate(steps, start=1))
    return lines