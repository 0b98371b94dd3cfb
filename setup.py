# setup.py
from setuptools import setup, find_packages

setup(
    name="blog_scout",
    version="0.1.0",
    description="Naver Blog / Tistory post collector with quality filtering",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"blog_scout.report": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
        "Jinja2>=3.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["blog-scout=blog_scout.cli:cli"],
    },
    python_requires=">=3.11",
)
