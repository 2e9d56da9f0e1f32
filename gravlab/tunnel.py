"""Local port forwarding to a workspace over SSH or Session Manager."""

from __future__ import annotations

import json
import os
import shutil
import subprocess
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping

JUPYTER_PORT = 8888
_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class InstanceSelectionError(LookupError):
    """No single instance could be chosen to connect to."""


@dataclass
class InstanceSummary:
    """The locally recorded facts about a launched instance."""

    id: str
    environment: str
    instance_type: str
    launched_at: datetime
    public_ip: str = ""

    def describe(self) -> list[str]:
        """Return the indented lines shown when listing this instance."""
        lines = [
            f"  {self.id}",
            f"    Environment: {self.environment}",
            f"    Type: {self.instance_type}",
        ]
        if self.public_ip:
            lines.append(f"    Public IP: {self.public_ip}")
        lines.append(f"    Launched: {self.launched_at.strftime(_TIME_FORMAT)}")
        return lines


def ssh_tunnel_command(
    key_path: str | os.PathLike[str],
    local_port: int,
    remote_port: int,
    username: str,
    host: str,
) -> list[str]:
    """Return the ssh invocation forwarding a local port to the remote one."""
    return [
        "ssh",
        "-i",
        os.fspath(key_path),
        "-N",
        "-L",
        f"{local_port}:localhost:{remote_port}",
        "-o",
        "StrictHostKeyChecking=no",
        "-o",
        "UserKnownHostsFile=/dev/null",
        "-o",
        "ServerAliveInterval=60",
        "-o",
        "ServerAliveCountMax=3",
        f"{username}@{host}",
    ]


def ssm_port_forward_command(
    instance_id: str, local_port: int, remote_port: int
) -> list[str]:
    """Return the aws CLI invocation for Session Manager port forwarding."""
    parameters = json.dumps(
        {"portNumber": [str(remote_port)], "localPortNumber": [str(local_port)]},
        separators=(",", ":"),
    )
    return [
        "aws",
        "ssm",
        "start-session",
        "--target",
        instance_id,
        "--document-name",
        "AWS-StartPortForwardingSession",
        "--parameters",
        parameters,
    ]


def start_ssh_tunnel(
    key_path: str | os.PathLike[str],
    local_port: int,
    username: str,
    host: str,
) -> subprocess.Popen:
    """Start an SSH tunnel to Jupyter Lab in the background and return it."""
    if not os.path.exists(key_path):
        raise FileNotFoundError(f"SSH key not found: {os.fspath(key_path)}")
    command = ssh_tunnel_command(key_path, local_port, JUPYTER_PORT, username, host)
    try:
        return subprocess.Popen(command)
    except OSError as error:
        raise RuntimeError(f"failed to start SSH tunnel: {error}") from error


def start_ssm_port_forwarding(instance_id: str, local_port: int) -> subprocess.Popen:
    """Start Session Manager port forwarding in the background and return it."""
    if shutil.which("aws") is None:
        raise FileNotFoundError("AWS CLI not found. Please install it first")
    command = ssm_port_forward_command(instance_id, local_port, JUPYTER_PORT)
    try:
        return subprocess.Popen(command)
    except OSError as error:
        raise RuntimeError(
            f"failed to start Session Manager port forwarding: {error}\n"
            "Make sure the Session Manager plugin is installed"
        ) from error


def select_instance(instances: Mapping[str, InstanceSummary]) -> str:
    """Pick the instance to connect to when none was named.

    A single instance is chosen automatically; with several, they are listed
    and the caller is asked to name one.
    """
    if not instances:
        raise InstanceSelectionError(
            "no instances found. Launch an instance first with 'aws-jupyter launch'"
        )
    if len(instances) == 1:
        (instance_id,) = instances
        print(f"Auto-selecting instance: {instance_id}")
        return instance_id

    print("Multiple instances found:")
    print()
    for instance_id in sorted(instances):
        for line in instances[instance_id].describe():
            print(line)
        print()
    raise InstanceSelectionError(
        "please specify which instance to connect to: aws-jupyter connect INSTANCE_ID"
    )