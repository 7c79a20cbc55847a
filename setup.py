#!/usr/bin/env python3
# Copyright 2025 R5
# This file is part of the R5 Core library.
#
# This software is provided "as is", without warranty of any kind,
# express or implied, including but not limited to the warranties
# of merchantability, fitness for a particular purpose and
# noninfringement. In no event shall the authors or copyright
# holders be liable for any claim, damages, or other liability,
# whether in an action of contract, tort or otherwise, arising
# from, out of or in connection with the software or the use or
# other dealings in the software.

from setuptools import setup, find_packages

setup(
    name='scfactory',
    version='0.1.0',
    description='CLI for scaffolding contract projects and deploying through a contract factory',
    author='R5 Core Team',
    author_email='support@r5.network',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'scfactory': [
            'templates/*.ts',
            'templates/contracts/*.sol',
            'templates/scripts/*.ts',
        ],
    },
    install_requires=[
        'web3>=7',
        'eth-account>=0.13',
        'eth-abi>=5',
        'eth-utils>=5',
        'python-dotenv',
    ],
    extras_require={
        'test': ['pytest', 'hexbytes'],
    },
    entry_points={
        'console_scripts': [
            'scfactory = scfactory.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
