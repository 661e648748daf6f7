# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""
Trellis build configuration.

Pure-Python package; the repository root is the ``trellis`` package
itself and is mapped through ``package_dir``.

Build
-----
    pip install -e .                          # editable install
    pip install -e .[dev]                     # with test tooling
    python setup.py bdist_wheel               # wheel
"""
import os

from setuptools import setup

# ── Package metadata ──
_readme = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'README.md')
try:
    with open(_readme, 'r', encoding='utf-8') as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = ''

setup(
    name='trellis',
    version='0.1.0',
    author='Pictofeed, LLC',
    author_email='engineering@pictofeed.io',
    description=(
        'NumPy optimizers and learning-rate schedules with a torch-style API'
    ),
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='Proprietary',

    package_dir={
        'trellis': '.',
        'trellis.nn': 'nn',
        'trellis.optim': 'optim',
        'trellis.utils': 'utils',
    },
    packages=[
        'trellis',
        'trellis.nn',
        'trellis.optim',
        'trellis.utils',
    ],

    python_requires='>=3.10',
    install_requires=[
        'numpy>=1.24',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0',
        ],
    },

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: Other/Proprietary License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
    ],
    zip_safe=False,
)
