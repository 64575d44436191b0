#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

setup(
    name="scanwedge",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="Keyboard-wedge barcode scanner input: scan detection, key decoding and DataMatrix label parsing",
    long_description="Tells hardware barcode scanner input apart from human typing by keystroke timing, "
    "decodes the buffered key presses, and parses 1D barcodes and [)> 06 DataMatrix part labels.",
    author="Rose Davidson",
    author_email="rose@metaclassical.com",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
    keywords=["barcode", "datamatrix", "keyboard wedge", "trio"],
    python_requires=">=3.10",
    install_requires=[
        "cattrs>=22.1.0",
        "msgspec>=0.16",
        "pygtrie>=2.4.2",
        "trio>=0.22.0",
        "trio-util>=0.7.0",
    ],
    tests_require=["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    extras_require={
        "test": ["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    },
    entry_points={
        "console_scripts": [
            "scanwedge-decode = scanwedge.app:decode_cli",
            "scanwedge-replay = scanwedge.app:replay_cli",
        ],
    },
)
