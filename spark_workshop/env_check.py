"""Checks for the setup steps in docs/setup.md."""

import os
import shutil
from dataclasses import dataclass
from importlib import metadata
from typing import Iterable, List

from spark_workshop.errors import EnvironmentCheckError
from spark_workshop.log import get_logger

logger = get_logger(__name__)

DEFAULT_VARS = ("JAVA_HOME",)
DEFAULT_PACKAGES = ("pyspark", "pandas", "pyarrow", "dbldatagen", "Faker")


@dataclass
class CheckResult:
    name: str
    ok: bool
    detail: str


def check_env_var(name: str) -> CheckResult:
    value = os.environ.get(name)
    if not value:
        return CheckResult(name, False, "not set")
    if name.endswith("_HOME") and not os.path.isdir(value):
        return CheckResult(name, False, f"{value} is not a directory")
    return CheckResult(name, True, value)


def check_package(name: str) -> CheckResult:
    try:
        return CheckResult(name, True, metadata.version(name))
    except metadata.PackageNotFoundError:
        return CheckResult(name, False, "not installed")


def check_java() -> CheckResult:
    java_home = os.environ.get("JAVA_HOME")
    if java_home:
        candidate = os.path.join(java_home, "bin", "java")
        if os.access(candidate, os.X_OK):
            return CheckResult("java", True, candidate)
    found = shutil.which("java")
    if found:
        return CheckResult("java", True, found)
    return CheckResult("java", False, "no java executable on PATH or under JAVA_HOME")


def check_environment(
    required_vars: Iterable[str] = DEFAULT_VARS,
    packages: Iterable[str] = DEFAULT_PACKAGES,
) -> List[CheckResult]:
    results = [check_env_var(name) for name in required_vars]
    results += [check_package(name) for name in packages]
    results.append(check_java())

    for result in results:
        if not result.ok:
            logger.warning("environment_check_failed", check=result.name, detail=result.detail)
    return results


def assert_environment(
    required_vars: Iterable[str] = DEFAULT_VARS,
    packages: Iterable[str] = DEFAULT_PACKAGES,
) -> List[CheckResult]:
    """Like check_environment, but raise if anything failed."""
    results = check_environment(required_vars, packages)
    failures = [result for result in results if not result.ok]
    if failures:
        raise EnvironmentCheckError(failures)
    return results
