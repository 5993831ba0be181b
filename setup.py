# setup.py
from setuptools import find_packages, setup

setup(
    name="site_census",
    version="0.1.0",
    description="Polite single-domain crawler that records url, title and HTTP status of every page",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"site_census": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "Jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "site_census=site_census.cli:main",
        ],
    },
    python_requires=">=3.11",
)
