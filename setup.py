"""Build configuration for qshelper."""
import os
import re

from setuptools import setup, find_packages


def read_version():
    path = os.path.join(os.path.dirname(__file__), "src", "qshelper", "__init__.py")
    with open(path) as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.MULTILINE)
    return match.group(1)


setup(
    name="qshelper",
    version=read_version(),
    description="Order-preserving edits of URL query strings",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "click>=8.1",
        "werkzeug>=2.3",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["qshelper = qshelper.cli:main"],
    },
)
