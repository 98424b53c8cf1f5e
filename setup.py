"""
Setup script for type-rating-prep.

Exam preparation engine for airline type-rating ground school:

1. Category matching - multilingual, human-entered category labels
2. Session assembly - practice, timed and review question sessions
3. Review queue - missed questions re-surfaced until answered correctly
4. Lesson progress - theory/flashcards/quiz tracking and module gating

The 'prep' command is the entry point.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="type-rating-prep",
    version="1.0.0",
    description="Type-rating exam prep engine: session assembly, review queue and lesson progress",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "prep=src.cli.prep_cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="aviation type-rating exam-prep education cli",
)
