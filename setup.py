"""setuptools setup for PeakRush.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import find_packages, setup

setup(
    name="PeakRush",
    version="0.1.0",
    description="Suspension-resilient interval workout timer engine",
    packages=find_packages(include=["peakrush", "peakrush.*"]),
    py_modules=["main"],
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "loguru>=0.7",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["peakrush=peakrush.__main__:main"],
    },
)
