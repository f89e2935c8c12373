"""
Setup configuration for mq_adapter package.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="mq-adapter",
    version="0.1.0",
    author="vfrog",
    description="Thin adapter for publishing to and subscribing from Google Cloud Pub/Sub",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.5.0",
        "google-cloud-pubsub>=2.18.0",
        "google-auth>=2.23.0",
        "google-api-core>=2.11.0",
        "elasticsearch>=8.11.0",  # Optional log sink, enabled via ELASTICSEARCH_HOST
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
)
