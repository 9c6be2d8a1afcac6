"""
Setup script for Trend Monitor - keyword trend ingestion and analysis service.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="trend-monitor",
    version="1.0.0",
    description="Brand and trend monitoring across news, Reddit, Hacker News and Finnish outlets",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Trend Monitor Team",
    packages=find_packages(include=["trend_monitor", "trend_monitor.*", "api", "api.*"]),
    python_requires=">=3.11",
    install_requires=[
        # Database driver
        "asyncpg>=0.29.0",

        # Data processing
        "numpy>=1.24.0",

        # NLP and text processing
        "langdetect>=1.0.9",
        "feedparser>=6.0.10",
        "beautifulsoup4>=4.12.0",

        # HTTP client
        "aiohttp>=3.9.0",

        # Data validation
        "pydantic>=2.5.0",

        # API
        "fastapi>=0.109.0",
        "uvicorn[standard]>=0.27.0",
        "slowapi>=0.1.9",

        # Monitoring and observability
        "prometheus-client>=0.19.0",

        # Utilities
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.26.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "trend-monitor=trend_monitor.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
        "Topic :: Text Processing :: Linguistic",
    ],
    include_package_data=True,
    zip_safe=False,
)
