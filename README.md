# gravlab

`gravlab` helps you describe a Jupyter Lab workstation for an ARM cloud
instance and reach it once it runs. It works out an environment definition from
your local Python project, checks launch options, describes what a launch would
do, follows setup progress output, and starts SSH or Session Manager tunnels to
the Jupyter server.

## Installation

```
pip install gravlab
```

For running the test suite:

```
pip install "gravlab[test]"
```

## Command line

The package installs one command, `gravlab`, with one subcommand:

```
gravlab --help
gravlab --version
```

### Generating an environment definition

`gravlab generate` looks at a project and writes an environment file in YAML.
It gathers packages from:

1. `requirements.txt` in the source directory (or the file given as source),
2. the active conda environment, if `conda` runs (packages from the `pypi`
   channel and common scientific packages),
3. the output of `pip freeze`, leaving out `pip`, `setuptools`, `wheel` and
   `pkg-resources`,
4. `import` and `from` lines in the code cells of `.ipynb` notebooks below the
   source, mapped to package names (`sklearn` → `scikit-learn`, `PIL` →
   `Pillow`, `cv2` → `opencv-python`, …); unrecognised imports are dropped.

```
gravlab generate --source ./my-project --name analysis
```

Options:

- `-s`, `--source` – directory or file to analyse (default `.`)
- `-o`, `--output` – output path (default `<name>.yaml`)
- `-n`, `--name` – environment name (default `generated`)
- `-t`, `--instance-type` – instance type (default `m7g.medium`)
- `--scan-notebooks` / `--no-scan-notebooks` – whether to read notebooks
  (default on)

The detected packages are added, sorted, after the base pip packages
`jupyterlab`, `notebook` and `ipywidgets`. When the instance type is left at
`m7g.medium`, a type is suggested from the packages: `m7g.large` for `torch`,
`tensorflow`, `transformers` or `datasets`, `c7g.large` for `scipy`,
`scikit-learn` or `opencv-python`. The root volume size is always set to 40 GB
for deep-learning libraries, 25 GB for scientific computing libraries, and
15 GB otherwise.

## Library use

```python
from gravlab.generate import create_base_environment, suggest_instance_type
from gravlab.launchopts import parse_duration, validate_launch_options
from gravlab.dryrun import dry_run_configuration, dry_run_actions
from gravlab.tunnel import ssh_tunnel_command

env = create_base_environment("analysis", "m7g.medium")
env.pip_packages.extend(["pandas", "torch"])
env.instance_type = suggest_instance_type(env.pip_packages)   # "m7g.large"
print(env.to_yaml())

idle = parse_duration("4h")                    # 14400
method, subnet = validate_launch_options("ssh", "public")

for line in dry_run_configuration(env, "us-east-1", "default", "", "4h",
                                  "ssh", "public", False, "my-key"):
    print(line)
for line in dry_run_actions(env, "ssh", "public", False, "my-key"):
    print(line)

print(ssh_tunnel_command("~/.ssh/my-key.pem", 8888, 8888, "ubuntu", "203.0.113.10"))
```

Modules:

- `gravlab.environment` – the `Environment` dataclass, with `to_dict`,
  `to_yaml` and `from_dict`.
- `gravlab.generate` – requirement, conda, pip and notebook scanning, the
  instance type and volume suggestions, and `generate`, which writes the file.
  `parse_requirements` raises `RequirementsNotFound` when nothing is found.
- `gravlab.launchopts` – `parse_duration` (`s`, `m`, `h`, `d` units; raises
  `ValueError` otherwise), the `ConnectionMethod` and `SubnetType` enums,
  `validate_launch_options`, `launch_warnings`, `ssh_username` (`ec2-user` for
  Amazon Linux bases, otherwise `ubuntu`) and `region_from_availability_zone`.
- `gravlab.dryrun` – the lines describing the configuration and the numbered
  actions a launch would carry out.
- `gravlab.progress` – `progress_command` for tailing the setup log over SSH,
  `ProgressTracker`, which reports each `STEP:` line once and stops at
  `COMPLETE`, and `ReadinessThrottle`, which shows a readiness message when 20
  seconds have passed or when it mentions `ready` or `SSM`.
- `gravlab.tunnel` – the ssh and `aws ssm start-session` command lines,
  `start_ssh_tunnel` and `start_ssm_port_forwarding`, which start them in the
  background and return the process, `InstanceSummary`, and `select_instance`,
  which picks the only instance or raises `InstanceSelectionError`.
- `gravlab.processes` – `process_alive`, `kill_process` (SIGTERM, then
  SIGKILL) and `format_uptime` (e.g. `2h30m`).

## What gravlab does not do

`gravlab` does not call any cloud API. It does not launch, start, stop or
terminate instances, create images, key pairs, security groups or networks,
and it keeps no local record of launched instances. It does not produce the
boot script that installs the environment on an instance. The only command is
`generate`; tunnels and dry-run descriptions are available from Python.