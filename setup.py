#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages
import os
import re


# Read the contents of README file
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Read requirements from requirements.txt
with open(os.path.join(this_directory, 'requirements.txt')) as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]


# Read version from __init__.py
def get_version():
    version_file = os.path.join(this_directory, 'subnetcalc', '__init__.py')
    with open(version_file, 'r') as f:
        version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", f.read(), re.M)
        if version_match:
            return version_match.group(1)
    raise RuntimeError("Unable to find version string.")


setup(
    name='subnetcalc',
    version=get_version(),
    author='SubnetCalc contributors',
    description='IPv4 subnet calculator library and command-line tool',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages(include=['subnetcalc', 'subnetcalc.*']),
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: System Administrators',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: System :: Networking',
        'Topic :: Utilities',
    ],
    python_requires='>=3.9',
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=8.0.0',
            'pre-commit',
            'flake8',
        ],
    },
    entry_points={
        'console_scripts': [
            'subnetcalc=subnetcalc.cli:main',
        ],
    },

    keywords='network calculator subnet ip address cidr netmask',
)
