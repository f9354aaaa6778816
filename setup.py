#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

setup(
    name="jogshuttle",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="Turn ShuttlePRO v2 jog/shuttle input into actions or commands",
    long_description="Reads a Contour ShuttlePRO v2 through evdev and prints key, jog and shuttle actions, or runs a command for each.",
    author="Rose Davidson",
    author_email="rose@metaclassical.com",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Multimedia :: Video",
        "Topic :: System :: Hardware",
    ],
    keywords=["evdev", "shuttlepro", "jog", "shuttle"],
    python_requires=">=3.11",
    install_requires=[
        "cattrs>=23.1",
        "libevdev>=0.11",
        "msgspec",
        "trio>=0.23.0",
    ],
    extras_require={
        "test": ["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    },
    entry_points={
        "console_scripts": [
            "jogshuttle = jogshuttle.app:main",
            "jogshuttle-raw-events = jogshuttle.scripts:raw_events_cli",
            "jogshuttle-tablet = jogshuttle.scripts:tablet_events_cli",
        ],
    },
)
