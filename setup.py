#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

setup(
    name="feednotes",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="a feed of short notes, edited with vim keys in the terminal",
    long_description="TODO",
    author="Rose Davidson",
    author_email="rose@metaclassical.com",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Environment :: Console :: Curses",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: POSIX",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Text Editors",
    ],
    keywords=[
        "notes",
        "vim",
        "curses",
    ],
    python_requires=">=3.11",
    install_requires=[
        "attrs",
        "cattrs",
        "msgspec",
        "pygtrie>=2.4.2",
        "python-dateutil>=2.8.1",
        "trio>=0.20.0",
    ],
    tests_require=["pytest>=6.2.4", "pytest-trio"],
    extras_require={
        "test": ["pytest>=6.2.4", "pytest-trio"],
    },
    entry_points={
        "console_scripts": [
            "feednotes = feednotes.app:main",
        ],
    },
)
