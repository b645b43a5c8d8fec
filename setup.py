#!/usr/bin/env python3

import os

from setuptools import find_namespace_packages, setup

if __name__ == '__main__':
    setup(
        name='aiofifo',
        version='0.1.0',
        description='Fair mutex and cancellable FIFO queue for async Python',
        license='ISC',
        python_requires='>=3.8',
        install_requires=[
            'sniffio>=1.3.0',
            'wrapt>=1.16.0',
            'typing-extensions>=4.6.0; python_version < "3.11"',
        ],
        extras_require={
            'trio': ['trio>=0.23.0'],
            'test': [
                'anyio>=4.0.0',
                'pytest>=8.0.0',
                'trio>=0.23.0',
            ],
        },
        package_dir={'': 'src'},
        packages=find_namespace_packages(where='src'),
        py_modules=[
            entry.name[:-3]
            for entry in os.scandir('src')
            if (
                not entry.name.startswith('.')
                and entry.name.endswith('.py')
                and entry.is_file()
            )
        ]
    )
