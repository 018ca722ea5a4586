#!/usr/bin/env python
#
# setup.py - installer script for EZT package
#
# October 2026
# Copyright (c) 2026 the EZT project developers.
# See the COPYRIGHT.txt file at the top-level directory of this distribution.
#
# This file is part of the EZT (Eager-Zeroed Thick disk) project.
# It is subject to the license terms in the LICENSE.txt file found in the
# top-level directory of this distribution. No part of EZT, including this
# file, may be copied, modified, propagated, or distributed except according
# to the terms contained in the LICENSE.txt file.

"""EZT - eager-zeroed thick disk provisioner for vSphere."""

import os.path
import re

from setuptools import setup

HERE = os.path.dirname(os.path.abspath(__file__))

README_FILE = os.path.join(HERE, 'README.rst')


def read_version():
    """Get the package version without importing the package."""
    with open(os.path.join(HERE, 'EZT', '__init__.py')) as init_file:
        match = re.search(r'^__version__ = "([^"]+)"', init_file.read(),
                          re.MULTILINE)
    return match.group(1)


install_requires = [
    'colorlog>=2.5.0',
    'pyvmomi>=6.7',
    'requests>=2.5.1',
    'verboselogs>=1.6',
]

extras_require = {
    'tab-completion': ['argcomplete>=1.3.0'],
    'tests': ['mock'],
}

setup(
    # Package description
    name='ezt',
    version=read_version(),
    description='Eager-zeroed thick disk provisioner for VMware vSphere',
    long_description=open(README_FILE).read(),
    license='MIT',

    # Requirements
    python_requires='>=3.5',
    install_requires=install_requires,
    extras_require=extras_require,

    # Package contents
    packages=[
        'EZT',
        'EZT.commands',
        'EZT.commands.tests',
        'EZT.tests',
        'EZT.ui',
        'EZT.ui.tests',
        'EZT.vsphere',
        'EZT.vsphere.tests',
    ],
    entry_points={
        'console_scripts': [
            'ezt = EZT.ui.cli:main',
        ],
    },

    # PyPI search categories
    classifiers=[
        # Project status
        'Development Status :: 3 - Alpha',
        # Target audience
        'Intended Audience :: Information Technology',
        'Intended Audience :: System Administrators',
        'Topic :: System :: Systems Administration',
        # Licensing
        'License :: OSI Approved :: MIT License',
        # Environment
        'Environment :: Console',
        'Operating System :: MacOS :: MacOS X',
        'Operating System :: POSIX :: Linux',
        # Supported versions
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
    ],
    keywords='virtualization vmdk esxi vmware vcenter vsphere',
)
