"""
Setup script for the livebar pytest progress bar.
"""

from setuptools import setup, find_packages

setup(
    name="pytest-livebar",
    version="0.1.0",
    description="Live, colour-coded pytest progress bar with inline failure reports",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Livebar Team",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pytest>=8.0.0",
        "pydantic>=2.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "hypothesis>=6.0.0",
        ],
    },
    entry_points={
        "pytest11": [
            "livebar = livebar.plugin",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Framework :: Pytest",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
