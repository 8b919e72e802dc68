#!/usr/bin/env python3
"""
Setup-Script für den SISIS-OPAC-Client
"""

from setuptools import setup, find_packages
import os

# Version aus version.py lesen
version_file = os.path.join(os.path.dirname(__file__), 'version.py')
version_data = {}
with open(version_file, 'r', encoding='utf-8') as f:
    exec(f.read(), version_data)

# README für PyPI
with open('README.md', 'r', encoding='utf-8') as f:
    long_description = f.read()

# Requirements
with open('requirements.txt', 'r', encoding='utf-8') as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]

setup(
    name='sisis-opac-client',
    version=version_data['__version__'],
    author=version_data['__author__'],
    author_email='daniel.gaida@th-koeln.de',
    description=version_data['__description__'],
    long_description=long_description,
    long_description_content_type='text/markdown',
    url='https://github.com/dgaida/sisis-opac-client',
    project_urls={
        'Bug Tracker': 'https://github.com/dgaida/sisis-opac-client/issues',
        'Documentation': 'https://github.com/dgaida/sisis-opac-client#readme',
        'Source Code': 'https://github.com/dgaida/sisis-opac-client',
    },
    packages=find_packages(exclude=['tests', 'tests.*']),
    py_modules=['main', 'version'],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Internet :: WWW/HTTP :: Indexing/Search',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Operating System :: OS Independent',
        'Natural Language :: German',
    ],
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'pytest-mock>=3.10.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'library-opac=main:main',
        ],
    },
    include_package_data=True,
    package_data={
        '': ['*.md', '*.txt', '*.json'],
    },
    keywords='bibliothek library opac sisis katalog webopac dresden',
    license=version_data['__license__'],
    zip_safe=False,
)
