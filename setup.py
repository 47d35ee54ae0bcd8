"""Setup script for Math Atoms"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="math-atoms",
    version="0.1.0",
    author="Math Atoms Team",
    description="Bidirectional conversion between LaTeX text/math source and typed atom trees",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Text Processing :: Markup :: LaTeX",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pyyaml>=5.4.0",
        "regex>=2021.8.0",
    ],
    extras_require={
        "dev": ["pytest>=6.0.0", "pytest-cov>=2.10.0", "black>=21.0", "flake8>=3.9.0"],
    },
)
