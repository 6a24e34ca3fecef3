#!/usr/bin/env python
"""
Magpie
======

Magpie is a Python client which turns exceptions, log records and messages
into bounded, redacted events. It ships a priority ordered pipeline of
integrations and processors, a breadcrumb recorder, a ``logging`` bridge
and drop-in support for any `WSGI <https://wsgi.readthedocs.io/>`_-compatible
web application.
"""

from setuptools import setup, find_packages
import re
import ast


_version_re = re.compile(r'VERSION\s+=\s+(.*)')

with open('magpie/__init__.py', 'rb') as f:
    version = str(ast.literal_eval(_version_re.search(
        f.read().decode('utf-8')).group(1)))


install_requires = []

tests_require = [
    'mock',
    'pytest',
]


setup(
    name='magpie',
    version=version,
    author='Magpie Team',
    description='Magpie captures exceptions and messages as structured events',
    long_description=__doc__,
    packages=find_packages(exclude=("tests", "tests.*",)),
    zip_safe=False,
    extras_require={
        'tests': tests_require,
    },
    license='BSD',
    tests_require=tests_require,
    install_requires=install_requires,
    include_package_data=True,
    python_requires='>=3.8',
    classifiers=[
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python',
        'Topic :: Software Development',
    ],
)
