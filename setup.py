"""
Setup script for installing the local npm repository manager CLI.
"""
from setuptools import setup, find_packages

setup(
    name='local-npm-repository-manager',
    version='1.0.0',
    description='Cache-first npm package installer with a daily update check',
    author='Your Name',
    packages=find_packages(exclude=['tests', 'tests.*']),
    py_modules=['lnr'],
    install_requires=[
        'colorama>=0.4.6',
        'tabulate>=0.9.0',
        'requests>=2.31.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'lnr=local_npm_repo.cli:main',
        ],
    },
    python_requires='>=3.7',
)
