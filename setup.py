#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import re
from pathlib import Path

from setuptools import find_packages, setup

_version_file = Path(__file__).parent / 'nanowallet' / 'version.py'
__version__ = re.search(r"^__version__ = '([^']+)'", _version_file.read_text(), re.MULTILINE).group(1)

install_requires = [
    'base58>=2.1',
    'colorama>=0.4',
    'configargparse>=1.5',
    'pydantic>=2.5,<3',
    'PyYAML>=6.0',
    'structlog>=22.3',
    'twisted>=22.10',
    'typing_extensions>=4.8',
    'zope.interface>=5.0',
]

setup(
    name='nanowallet',
    version=__version__,
    description='Owner and controller guarded wallet contract with a daily spending limit',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache-2.0',
    python_requires='>=3.11',
    entry_points={
        'console_scripts': ['nanowallet-cli=nanowallet.cli.main:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    packages=find_packages(exclude=('tests', 'tests.*')),
    package_data={'nanowallet.conf': ['*.yml']},
    install_requires=install_requires,
    extras_require={
        'test': ['pytest>=7.2'],
    },
)
