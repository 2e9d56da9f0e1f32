import json
from datetime import datetime
from unittest import mock

import pytest

from gravlab.tunnel import (
    InstanceSelectionError,
    InstanceSummary,
    select_instance,
    ssh_tunnel_command,
    ssm_port_forward_command,
    start_ssh_tunnel,
    start_ssm_port_forwarding,
)


def _summary(instance_id, public_ip=""):
    return InstanceSummary(
        id=instance_id,
        environment="data-science",
        instance_type="m7g.medium",
        launched_at=datetime(2024, 1, 2, 3, 4, 5),
        public_ip=public_ip,
    )


def test_ssh_command_forwards_ports():
    cmd = ssh_tunnel_command("/keys/k.pem", 9000, 8888, "ubuntu", "1.2.3.4")
    assert cmd[0] == "ssh"
    assert cmd[cmd.index("-i") + 1] == "/keys/k.pem"
    assert cmd[cmd.index("-L") + 1] == "9000:localhost:8888"
    assert "-N" in cmd
    assert "StrictHostKeyChecking=no" in cmd
    assert "UserKnownHostsFile=/dev/null" in cmd
    assert cmd[-1] == "ubuntu@1.2.3.4"


def test_ssm_command_parameters():
    cmd = ssm_port_forward_command("i-123456789", 9000, 8888)
    assert cmd[:3] == ["aws", "ssm", "start-session"]
    assert cmd[cmd.index("--target") + 1] == "i-123456789"
    assert cmd[cmd.index("--document-name") + 1] == "AWS-StartPortForwardingSession"
    params = json.loads(cmd[cmd.index("--parameters") + 1])
    assert params == {"portNumber": ["8888"], "localPortNumber": ["9000"]}


def test_start_ssh_tunnel_missing_key(tmp_path):
    with pytest.raises(FileNotFoundError, match="SSH key not found"):
        start_ssh_tunnel(tmp_path / "absent.pem", 8888, "ubuntu", "1.2.3.4")


def test_start_ssh_tunnel_launches_process(tmp_path):
    key = tmp_path / "k.pem"
    key.write_text("placeholder")
    with mock.patch("gravlab.tunnel.subprocess.Popen") as popen:
        popen.return_value.pid = 4321
        proc = start_ssh_tunnel(key, 9000, "ec2-user", "1.2.3.4")
    assert proc.pid == 4321
    args = popen.call_args[0][0]
    assert args == ssh_tunnel_command(key, 9000, 8888, "ec2-user", "1.2.3.4")


def test_start_ssh_tunnel_failure_raises(tmp_path):
    key = tmp_path / "k.pem"
    key.write_text("placeholder")
    with mock.patch("gravlab.tunnel.subprocess.Popen", side_effect=OSError("boom")):
        with pytest.raises(RuntimeError, match="failed to start SSH tunnel"):
            start_ssh_tunnel(key, 9000, "ubuntu", "1.2.3.4")


def test_start_ssm_requires_aws_cli():
    with mock.patch("gravlab.tunnel.shutil.which", return_value=None):
        with pytest.raises(FileNotFoundError, match="AWS CLI not found"):
            start_ssm_port_forwarding("i-123456789", 8888)


def test_start_ssm_launches_process():
    with mock.patch("gravlab.tunnel.shutil.which", return_value="/usr/bin/aws"), \
            mock.patch("gravlab.tunnel.subprocess.Popen") as popen:
        start_ssm_port_forwarding("i-123456789", 9000)
    assert popen.call_args[0][0] == ssm_port_forward_command("i-123456789", 9000, 8888)


def test_start_ssm_failure_raises():
    with mock.patch("gravlab.tunnel.shutil.which", return_value="/usr/bin/aws"), \
            mock.patch("gravlab.tunnel.subprocess.Popen", side_effect=OSError("x")):
        with pytest.raises(RuntimeError, match="Session Manager"):
            start_ssm_port_forwarding("i-123456789", 9000)


def test_select_instance_none():
    with pytest.raises(InstanceSelectionError, match="no instances found"):
        select_instance({})


def test_select_instance_single(capsys):
    chosen = select_instance({"i-123456789": _summary("i-123456789")})
    assert chosen == "i-123456789"
    assert "Auto-selecting instance: i-123456789" in capsys.readouterr().out


def test_select_instance_multiple_lists_and_raises(capsys):
    instances = {
        "i-987654321": _summary("i-987654321"),
        "i-123456789": _summary("i-123456789", public_ip="1.2.3.4"),
    }
    with pytest.raises(InstanceSelectionError, match="please specify"):
        select_instance(instances)
    out = capsys.readouterr().out
    assert out.startswith("Multiple instances found:")
    assert out.index("i-123456789") < out.index("i-987654321")
    assert "Public IP: 1.2.3.4" in out
    assert out.count("Public IP:") == 1


def test_describe_formats_launch_time():
    lines = _summary("i-123456789").describe()
    assert lines[0] == "  i-123456789"
    assert lines[-1] == "    Launched: 2024-01-02 03:04:05"
    assert not any("Public IP" in line for line in lines)