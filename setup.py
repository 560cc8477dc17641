from setuptools import setup, find_packages

setup(
    name="cachekit",
    version="0.1.0",
    packages=find_packages(exclude=["cachekit.tests", "cachekit.tests.*"]),
    install_requires=[
        "pydantic>=1.8.0,<2.0.0",
        "python-dotenv>=0.19.0",
        "PyYAML>=5.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
)
