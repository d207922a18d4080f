#!/usr/bin/env python3
from setuptools import setup, find_packages

setup(
    name="etagsum",
    version="0.1.0",
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.7',
    install_requires=[
        'humanfriendly'
    ],
    extras_require={
        'test': [
            'pytest'
        ]
    },
    license="GPL",
    entry_points={
        'console_scripts': [
            'etagsum = etagsum.main:main'
        ]
    }
)
