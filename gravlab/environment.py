"""Environment configuration describing how an instance is provisioned."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import yaml


@dataclass
class Environment:
    """A named set of packages and instance settings for a workspace."""

    name: str = ""
    instance_type: str = ""
    ami_base: str = ""
    ebs_volume_size: int = 0
    packages: list[str] = field(default_factory=list)
    pip_packages: list[str] = field(default_factory=list)
    r_packages: list[str] = field(default_factory=list)
    julia_packages: list[str] = field(default_factory=list)
    jupyter_extensions: list[str] = field(default_factory=list)
    environment_vars: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as plain data, keyed as in the YAML file."""
        return {
            "name": self.name,
            "instance_type": self.instance_type,
            "ami_base": self.ami_base,
            "ebs_volume_size": self.ebs_volume_size,
            "packages": list(self.packages),
            "pip_packages": list(self.pip_packages),
            "r_packages": list(self.r_packages),
            "julia_packages": list(self.julia_packages),
            "jupyter_extensions": list(self.jupyter_extensions),
            "environment_vars": dict(self.environment_vars),
        }

    def to_yaml(self) -> str:
        """Serialise the configuration as a YAML document."""
        return yaml.safe_dump(
            self.to_dict(),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Environment":
        """Build an environment from parsed YAML data; unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise TypeError("environment data must be a mapping")

        def _strings(key: str) -> list[str]:
            return [str(item) for item in data.get(key) or []]

        return cls(
            name=str(data.get("name") or ""),
            instance_type=str(data.get("instance_type") or ""),
            ami_base=str(data.get("ami_base") or ""),
            ebs_volume_size=int(data.get("ebs_volume_size") or 0),
            packages=_strings("packages"),
            pip_packages=_strings("pip_packages"),
            r_packages=_strings("r_packages"),
            julia_packages=_strings("julia_packages"),
            jupyter_extensions=_strings("jupyter_extensions"),
            environment_vars={
                str(k): str(v) for k, v in (data.get("environment_vars") or {}).items()
            },
        )