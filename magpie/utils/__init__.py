"""
magpie.utils
~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import logging
import threading

from importlib import metadata

logger = logging.getLogger('magpie.errors')


def merge_dicts(*dicts):
    out = {}
    for d in dicts:
        if not d:
            continue

        for k, v in d.items():
            out[k] = v
    return out


# We store a cache of distribution name->version to avoid
# walking sys.path on every event
_MODULES_CACHE = None
_modules_lock = threading.Lock()


def get_installed_modules():
    """
    Returns the ``{name: version}`` mapping of the installed distributions.
    """
    global _MODULES_CACHE

    if _MODULES_CACHE is None:
        with _modules_lock:
            if _MODULES_CACHE is None:
                modules = {}
                for dist in metadata.distributions():
                    try:
                        name = dist.metadata['Name']
                        version = dist.version
                    except Exception as e:
                        logger.exception(e)
                        continue
                    if name and version:
                        modules[name.lower()] = version
                _MODULES_CACHE = modules
    return dict(_MODULES_CACHE)

