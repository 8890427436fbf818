from setuptools import find_packages
from setuptools import setup


setup(
    name="ddtransport",
    version="0.1.0",
    description="HTTP transport sending traces and services to the Datadog trace agent",
    license="BSD-3-Clause",
    packages=find_packages(exclude=["tests*"]),
    package_data={
        "ddtransport": ["py.typed"],
    },
    python_requires=">=3.8",
    zip_safe=False,
    install_requires=[
        "envier~=0.6.1",
        "msgpack>=1.0.0",
    ],
    extras_require={
        "tests": [
            "hypothesis",
            "mock",
            "pytest",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
