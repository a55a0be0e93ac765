"""
Environment Resolution

Supplies the variables used to expand custom message templates such as
``"Deployed ${GIT_BRANCH} to $TARGET"``.
"""

import os
import re
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

from .models.build import BuildRecord

_MACRO = re.compile(r"\$(?:\{([A-Za-z0-9_.]+)\}|([A-Za-z_][A-Za-z0-9_]*))")


def expand_macros(template: str, env: Mapping[str, str]) -> str:
    """
    Replace ``$NAME`` and ``${NAME}`` with values from ``env``.

    Names missing from ``env`` are left as written.
    """
    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1) or match.group(2)
        value = env.get(name)
        return match.group(0) if value is None else value

    return _MACRO.sub(_replace, template)


class EnvironmentResolver(ABC):
    """Resolves the environment a build ran with."""

    @abstractmethod
    def get_environment(self, build: BuildRecord) -> Mapping[str, str]:
        """Return the build's environment. May raise on failure."""
        pass

    def expand(self, template: str, build: BuildRecord) -> str:
        """Expand a template against the build's environment. May raise."""
        return expand_macros(template, self.get_environment(build))


class MappingEnvironmentResolver(EnvironmentResolver):
    """Resolver backed by a fixed mapping."""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        self.env = dict(env or {})

    def get_environment(self, build: BuildRecord) -> Mapping[str, str]:
        return self.env


class OsEnvironmentResolver(EnvironmentResolver):
    """
    Resolver combining the process environment with build metadata.

    Build variables override process variables; the ``BUILD_*``/``JOB_NAME``
    entries override both.
    """

    def __init__(self, build_server_url: str = ""):
        self.build_server_url = build_server_url

    def get_environment(self, build: BuildRecord) -> Mapping[str, str]:
        env: Dict[str, str] = dict(os.environ)
        env.update(build.variables)
        env.update({
            "BUILD_NUMBER": str(build.number),
            "BUILD_DISPLAY_NAME": build.display_name,
            "JOB_NAME": build.project_full_name,
            "BUILD_URL": self.build_server_url + build.url,
        })
        return env
