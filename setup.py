from setuptools import setup, find_packages

setup(
    name="dirx",
    version="0.3.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    description="Concurrent per-extension statistics for a directory tree (a typed du).",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.9",
    install_requires=[
        "rich>=13.0",
        "tomli>=2.0; python_version < '3.11'",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "dirx=dirx.cli:main",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
)
