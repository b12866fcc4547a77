"""Load and validate site configuration YAML for sitecascade builds.

This subpackage parses the project's ``site.yaml`` file and produces typed
dataclasses (:class:`SiteConfig`, :class:`ComponentsConfig`,
:class:`StaticPathConfig`) that :func:`sitecascade.source.create_session`
and the CLI consume.

Examples
--------
>>> from pathlib import Path
>>> from sitecascade.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.components.variable  # doctest: +SKIP
'comp'
"""

from .loader import load_site_config
from .models import ComponentsConfig, SiteConfig, SiteConfigError, StaticPathConfig

__all__ = [
    "ComponentsConfig",
    "SiteConfig",
    "SiteConfigError",
    "StaticPathConfig",
    "load_site_config",
]
