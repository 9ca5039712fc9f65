from __future__ import annotations

from typing import Dict, List, Mapping

from launchpad.core.errors import DeprecatedEnvironment
from launchpad.core.profile import DEFAULT_PROFILE, Profile


# suffix -> remediation template. Placeholders: {name}, {value}, {options}, {java_opts}.
DEPRECATED_VARIABLES: Dict[str, str] = {
    "MIN_MEM": '{name}={value}: set -Xms{value} in {options} or add "-Xms{value}" to {java_opts}',
    "MAX_MEM": '{name}={value}: set -Xmx{value} in {options} or add "-Xmx{value}" to {java_opts}',
    "HEAP_SIZE": (
        '{name}={value}: set -Xms{value} and -Xmx{value} in {options} '
        'or add "-Xms{value} -Xmx{value}" to {java_opts}'
    ),
    "HEAP_NEWSIZE": '{name}={value}: set -Xmn{value} in {options} or add "-Xmn{value}" to {java_opts}',
    "DIRECT_SIZE": (
        '{name}={value}: set -XX:MaxDirectMemorySize={value} in {options} '
        'or add "-XX:MaxDirectMemorySize={value}" to {java_opts}'
    ),
    "USE_IPV4": (
        '{name}={value}: set -Djava.net.preferIPv4Stack=true in {options} '
        'or add "-Djava.net.preferIPv4Stack=true" to {java_opts}'
    ),
    "GC_OPTS": '{name}={value}: set {value} in {options} or add "{value}" to {java_opts}',
    "GC_LOG_FILE": '{name}={value}: set -Xloggc:{value} in {options} or add "-Xloggc:{value}" to {java_opts}',
}


def find_deprecated(environ: Mapping[str, str], profile: Profile = DEFAULT_PROFILE) -> List[str]:
    found: List[str] = []
    for suffix in DEPRECATED_VARIABLES:
        name = profile.var(suffix)
        if environ.get(name):
            found.append(name)
    return found


def remediation_lines(environ: Mapping[str, str], profile: Profile = DEFAULT_PROFILE) -> List[str]:
    lines: List[str] = []
    for suffix, template in DEPRECATED_VARIABLES.items():
        name = profile.var(suffix)
        value = environ.get(name)
        if not value:
            continue
        lines.append(
            template.format(
                name=name,
                value=value,
                options=profile.options_name,
                java_opts=profile.java_opts_var,
            )
        )
    return lines


def check_environment(environ: Mapping[str, str], profile: Profile = DEFAULT_PROFILE) -> None:
    """
    Reject the run when any deprecated variable carries a non-empty value.
    """
    names = find_deprecated(environ, profile)
    if not names:
        return
    raise DeprecatedEnvironment(
        code="env.deprecated",
        message=(
            "encountered environment variables that are no longer supported; "
            f"use {profile.options_name} or {profile.java_opts_var} to configure {profile.app_name}"
        ),
        data={"variables": names, "remediations": remediation_lines(environ, profile)},
    )
