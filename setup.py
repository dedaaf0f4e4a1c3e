# -*- coding: utf-8 -*-

import os

from setuptools import setup


with open(os.path.join(os.path.dirname(__file__), 'sttc_sweep',
                       'VERSION')) as version_file:
    version = version_file.read().strip()

install_requires = ['neo>=0.13.0',
                    'numpy>=1.22.0',
                    'quantities>=0.14.1',
                    'pydantic>=2.0']
extras_require = {'tests': ['pytest>=7.0']}

setup(
    name="sttc-sweep",
    version=version,
    packages=['sttc_sweep', 'sttc_sweep.schemas', 'sttc_sweep.test'],
    package_data={'sttc_sweep': ['VERSION']},
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires='>=3.11',

    author="Elephant authors and contributors",
    description="Spike Time Tiling Coefficient over a sweep of delta-t "
                "values, for validating faster implementations",
    license="BSD",
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: BSD License',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering'],
)
