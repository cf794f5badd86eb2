"""
Data directory provisioning.

Resolves a base directory into the cache directory `<base>/browscap/sqlite`
and checks that it can be used.
"""

import logging
import os
from pathlib import Path
from typing import Union

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

SUB_DIRECTORY = os.path.join("browscap", "sqlite")


def normalize_directory(directory: Union[str, Path]) -> str:
    """Unify path separators and strip a trailing separator."""
    directory = os.fspath(directory)
    directory = directory.replace("/", os.sep).replace("\\", os.sep)
    stripped = directory.rstrip(os.sep)
    # Keep the root itself intact; an empty path stays empty
    if not stripped and directory:
        return os.sep
    return stripped


class DirectoryProvisioner:
    """
    Validate and create the cache directory.

    The base directory must already exist; only the sub directory is
    created. Existing directories are never modified.

    Usage:
        >>> provisioner = DirectoryProvisioner()
        >>> provisioner.resolve("/tmp")
        PosixPath('/tmp/browscap/sqlite')
    """

    sub_directory = SUB_DIRECTORY

    def resolve(self, base: Union[str, Path]) -> Path:
        """
        Resolve and check the cache directory below base.

        Args:
            base: Existing base directory

        Returns:
            Path of the readable and writable cache directory

        Raises:
            ConfigurationError: If a check fails
        """
        base = normalize_directory(base)

        self.check_directory(base, create=False)

        directory = os.path.join(base, self.sub_directory)
        self.check_directory(directory, create=True)

        return Path(directory)

    def check_directory(self, directory: str, create: bool = False) -> None:
        """
        Check that directory exists (creating it if allowed) and is usable.

        Raises:
            ConfigurationError: With `requirement` set to the failed check
        """
        if not os.path.exists(directory):
            if not create:
                raise ConfigurationError(
                    f"Directory '{directory}' does not exist.",
                    code=1458974127,
                    directory=directory,
                    requirement="exists",
                )

            try:
                os.makedirs(directory, exist_ok=True)
                logger.debug("Created data directory %s", directory)
            except OSError as e:
                logger.debug("Could not create %s: %s", directory, e)

            if not os.path.isdir(directory):
                raise ConfigurationError(
                    f"Directory '{directory}' does not exist and could not be created.",
                    code=1458974127,
                    directory=directory,
                    requirement="create",
                )
        elif not os.path.isdir(directory):
            raise ConfigurationError(
                f"Path '{directory}' is not a directory.",
                code=1458974127,
                directory=directory,
                requirement="exists",
            )

        if not self.is_readable(directory):
            raise ConfigurationError(
                f"Directory '{directory}' is not readable.",
                code=1458974128,
                directory=directory,
                requirement="readable",
            )
        if not self.is_writable(directory):
            raise ConfigurationError(
                f"Directory '{directory}' is not writable.",
                code=1458974129,
                directory=directory,
                requirement="writable",
            )

    def is_readable(self, directory: str) -> bool:
        return os.access(directory, os.R_OK)

    def is_writable(self, directory: str) -> bool:
        return os.access(directory, os.W_OK)
