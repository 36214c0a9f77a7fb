from setuptools import setup, find_packages

setup(
    name="partialio",
    version="0.1.0",
    description="Scripted partial, interrupted and would-block I/O for testing buffering and retry code",
    author="adamfilli",
    packages=find_packages(include=["partialio", "partialio.*"]),
    install_requires=[
        "hypothesis",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
