#!/usr/bin/env python3
"""Setup script for bravia_tvos package."""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="bravia-tvos",
    version="1.0.0",
    author="",
    author_email="",
    description="Register Sony Bravia TVs as smart-home accessories",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/SeydX/homebridge-bravia-tvos",
    packages=find_packages(include=["bravia_tvos", "bravia_tvos.*", "bravia2mqtt", "bravia2mqtt.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Home Automation",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords="sony bravia tv mqtt smart-tv home-automation homekit",
    install_requires=[
        "paho-mqtt>=2.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "bravia2mqtt=bravia2mqtt.__main__:main",
        ],
    },
    python_requires=">=3.9",
)
