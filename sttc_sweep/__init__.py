# -*- coding: utf-8 -*-
"""
sttc_sweep computes the Spike Time Tiling Coefficient between two spike
trains over a sweep of synchronicity windows, based on Neo.

:copyright: Copyright 2014-2024 by the Elephant team, see `doc/authors.rst`.
:license: Modified BSD, see LICENSE.txt for details.
"""

from . import (
    spike_time_tiling,
    utils,
)


def _get_version():
    import os
    package_dir = os.path.dirname(__file__)
    with open(os.path.join(package_dir, 'VERSION')) as version_file:
        version = version_file.read().strip()
    return version


__version__ = _get_version()
