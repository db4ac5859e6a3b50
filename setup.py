#!/usr/bin/env python
# -*- coding: utf-8 -*-
import os

from setuptools import find_packages, setup

ROOT = os.path.dirname(os.path.abspath(__file__))

with open(os.path.join(ROOT, 'README.md'), encoding='utf8') as readme_file:
    readme = readme_file.read()
with open(os.path.join(ROOT, 'eventline', 'VERSION'), encoding='utf8') as version_file:
    version = version_file.read().strip()


setup(
    name='eventline',
    version=version,
    description="Buffers application events and delivers them to an ingestion endpoint in batches.",
    long_description=readme,
    long_description_content_type="text/markdown",
    author="eventline maintainers",
    packages=find_packages(include=['eventline', 'eventline.*']),
    package_data={'eventline': ['VERSION']},
    entry_points={
        'console_scripts': [
            'eventline=eventline.cli:cli'
        ]
    },
    include_package_data=True,
    install_requires=[
        'httpx>=0.24',
        'pydantic>=2.0',
        'typer>=0.9',
        'rich',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    python_requires=">=3.9",
    license="MIT license",
    zip_safe=False,
    keywords='events analytics telemetry batching',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ]
)
