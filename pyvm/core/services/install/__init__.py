"""
Install service — package re-exports.

    from pyvm.core.services.install import InstallPipeline, VersionResolver

resolver → strategies (legacy / modern, sharing layout + commands)
→ pipeline.
"""

from pyvm.core.services.install.base import InstallStrategy  # noqa: F401
from pyvm.core.services.install.legacy import LegacyInstallStrategy  # noqa: F401
from pyvm.core.services.install.modern import ModernInstallStrategy  # noqa: F401
from pyvm.core.services.install.pipeline import InstallPipeline  # noqa: F401
from pyvm.core.services.install.resolver import VersionResolver  # noqa: F401
