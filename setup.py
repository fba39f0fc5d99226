# gpcov/setup.py
#
# Copyright (c) 2020, 2022, 2024, Giacomo Petrillo
#
# This file is part of gpcov.
#
# gpcov is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# gpcov is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with gpcov.  If not, see <http://www.gnu.org/licenses/>.

import re

import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

# read the version without importing the package, which needs jax
with open("src/gpcov/__init__.py", "r") as fh:
    version = re.search(r"^__version__ = '(.+)'$", fh.read(), re.M).group(1)

setuptools.setup(
    name="gpcov",
    version=version,
    author="Giacomo Petrillo",
    author_email="info@giacomopetrillo.com",
    description="Algebra of Gaussian process kernels with structured evaluation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={'': 'src'},
    packages=setuptools.find_packages('src'),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Development Status :: 3 - Alpha",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.9',
    install_requires=[
        'numpy>=1.21', # first version with numpy.unique(equal_nan=True)
        'scipy>=1.6', # first version with linalg.matmul_toeplitz
        'jax>=0.4.14', # jax.Array as public type
        'jaxlib>=0.4.14',
    ],
    extras_require={
        'tests': [
            'pytest',
        ],
    },
)
