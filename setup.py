"""
Setup script for the match-orchestrator package.

Installs the match_orchestrator service (lobby rooms, matchmaking
queues, and competitive ladders) with its HTTP surface and CLI.
"""

from setuptools import setup, find_packages

setup(
    name="match-orchestrator",
    version="1.0.0",
    description="Match Orchestrator - puzzle lobby rooms, skill-based matchmaking, and ladders",
    author="Course Staff",
    license="Proprietary",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "httpx>=0.25.0",
        ],
        "dev": [
            "pytest>=7.4",
            "httpx>=0.25.0",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "match-orchestrator=match_orchestrator.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
