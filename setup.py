from setuptools import setup, find_packages

setup(
    name="hacktoberfest-checker",
    version="1.0.0",
    description="Lists a GitHub user's Hacktoberfest-eligible pull requests",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "aiohttp>=3.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "hacktoberfest-checker=hacktoberfest_checker.cli:main",
        ],
    },
)
