import pathlib

import setuptools

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

setuptools.setup(
    name="hive-engine-client",
    version="0.1.0",
    description="Engine API test client for execution clients started by hive",
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    packages=setuptools.find_packages(exclude=["*.tests", "*.tests.*"]),
    install_requires=[
        "requests>=2.31,<3",
        "PyJWT>=2.3.0,<3",
        "pydantic>=2.10.0,<3",
        "pyyaml>=6.0.2,<7",
        "pytest>=8,<9",
    ],
    extras_require={
        "test": [
            "pytest>=8,<9",
        ],
    },
)
