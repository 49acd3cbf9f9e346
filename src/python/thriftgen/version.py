# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

import os

from packaging.version import Version

# Set this env var to override the version thriftgen reports. Useful for testing.
_THRIFTGEN_VERSION_OVERRIDE = "_THRIFTGEN_VERSION_OVERRIDE"

VERSION: str = os.environ.get(_THRIFTGEN_VERSION_OVERRIDE) or "0.3.0"

THRIFTGEN_SEMVER = Version(VERSION)

# E.g. 0.3. Fingerprint state recorded by a release with a different major/minor is discarded.
MAJOR_MINOR = f"{THRIFTGEN_SEMVER.major}.{THRIFTGEN_SEMVER.minor}"
