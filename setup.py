# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="torrent-infohash",
    version="0.1",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["main"],
    install_requires=[
        # Codec and hash are self-contained
    ],
    entry_points={
        "console_scripts": ["torrent-infohash=main:main"],
    },
    python_requires=">=3.10",
)
