from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="mcflow",
    version="0.1.0",
    description="Maximum-flow and minimum-cost flow algorithms on capacitated networks.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    install_requires=["networkx>=3.0"],
    extras_require={"test": ["pytest", "networkx>=3.0"]},
    tests_require=["pytest", "networkx"],
    entry_points={"console_scripts": ["mcflow=mcflow.cli:main"]},
)
