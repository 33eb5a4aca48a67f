from setuptools import setup, find_packages

setup(
    name="queue-collapse-simulator",
    version="0.1.0",
    description="Discrete event simulation of queueing policy, timeouts and retry-driven congestion collapse",
    author="adamfilli",
    packages=find_packages(include=["queuesim", "queuesim.*"]),
    install_requires=[
        "matplotlib",
        "numpy",
        "pandas",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "queuesim=queuesim.cli:main",
        ],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
