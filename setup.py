# setup.py
from setuptools import setup, find_packages

setup(
    name="a11y_scout",
    version="0.1.0",
    description="A11yScout: asynchronous accessibility scanner (sitemap/crawl discovery + axe-core)",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"a11y_scout": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=5.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.2",
        "Jinja2>=3.1",
        "playwright>=1.40",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "a11y-scout=a11y_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
