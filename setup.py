#!/usr/bin/env python3
"""
Setup configuration for Lyricsync
Time-synced Spotify lyrics in the terminal
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "spotipy>=2.22.1",
    "click>=8.1.7",
    "pyyaml>=6.0.1",
    "requests>=2.31.0",
    "colorama>=0.4.6",
    "python-dotenv>=1.0.0",
    "wcwidth>=0.2.6",
    "opencc-python-reimplemented>=0.1.7",
    "windows-curses>=2.3.2; platform_system == 'Windows'",
]

setup(
    name="lyricsync",
    version="0.3.0",
    author="Lyricsync Team",
    author_email="contact@lyricsync.dev",
    description="Show time-synced lyrics for the current Spotify track in the terminal",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/lyricsync/lyricsync",
    packages=find_packages(include=["lyricsync", "lyricsync.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console :: Curses",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Terminals",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "lyricsync=lyricsync.main:cli",
        ],
    },
    keywords="spotify lyrics lrc lrclib karaoke terminal curses cli",
    project_urls={
        "Bug Reports": "https://github.com/lyricsync/lyricsync/issues",
        "Source": "https://github.com/lyricsync/lyricsync",
    },
)
