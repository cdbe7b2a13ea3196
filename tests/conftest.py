"""Shared pytest fixtures for jdd tests."""
import logging
import os
import time
from pathlib import Path
from typing import Callable, Dict, Any, List

import pytest
import yaml

from jdd.engine.config import DaemonConfig
from jdd.engine.outcome import Outcome
from jdd.infrastructure.logger import Logger
from jdd.rules.patterns import ExclusionSet


@pytest.fixture
def root_dir(tmp_path: Path) -> Path:
    """Watched root with symlinks resolved (macOS /tmp is a symlink)."""
    root = tmp_path.resolve() / "root"
    root.mkdir()
    return root


@pytest.fixture
def make_config(root_dir: Path) -> Callable[..., DaemonConfig]:
    """Factory for configs rooted at root_dir."""

    def factory(**overrides) -> DaemonConfig:
        overrides.setdefault("root", str(root_dir))
        return DaemonConfig(**overrides)

    return factory


@pytest.fixture
def no_exclusions(root_dir: Path) -> ExclusionSet:
    return ExclusionSet.compile([], str(root_dir))


@pytest.fixture
def outcomes() -> List[Outcome]:
    """List collecting reported outcomes."""
    return []


@pytest.fixture
def sample_config(root_dir: Path) -> Dict[str, Any]:
    """Provide a sample configuration file body."""
    return {
        "root": str(root_dir),
        "exclude": ["**/Archive/**", "*.part"],
        "dry_run": False,
        "delay": "250ms",
        "log_level": "debug",
        "daemonize": False,
        "notifications": False,
    }


@pytest.fixture
def config_file(tmp_path: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = tmp_path / ".jd.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture
def logger() -> Logger:
    """Test logger that records instead of printing."""
    return Logger("jdd.test", level="DEBUG", handlers=[logging.NullHandler()])


def _inventory(root: Path) -> List[str]:
    entries = []
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            entries.append(os.path.relpath(os.path.join(dirpath, name), root))
    return sorted(entries)


def _wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.05) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def inventory() -> Callable[[Path], List[str]]:
    """Sorted relative paths of every file and directory under a root."""
    return _inventory


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Poll a predicate until it is true or a timeout elapses."""
    return _wait_for
