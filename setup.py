from setuptools import setup, find_packages

setup(
    name="happy-batcher",
    version="0.1.0",
    description="Accumulate items and flush them as batches by size, predicate or timer",
    author="adamfilli",
    packages=find_packages(include=["happybatcher", "happybatcher.*"]),
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.10",
)
