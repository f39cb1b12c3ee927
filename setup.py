from __future__ import annotations

from setuptools import find_namespace_packages, setup

# The layout core lives in top-level packages (`core/`, `geometry/`, ...)
# without `__init__.py` files, so they are collected as namespace packages.
PACKAGES = ["core", "geometry", "parameters", "runtime", "visualization", "mesh_layout"]


setup(
    name="mesh-fr-layout",
    version="0.1.0",
    description="Fruchterman-Reingold force-directed 3D layout for closed triangle meshes",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=PACKAGES),
    py_modules=["main"],
    install_requires=[
        "numpy",
        "PyYAML",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
