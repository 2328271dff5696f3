"""Setup configuration for duppr"""

from setuptools import setup, find_packages

setup(
    name="duppr",
    version="0.1.0",
    description=(
        "CLI tool that duplicates a GitHub pull request onto another target "
        "branch by cherry-picking its commits."
    ),
    author="duppr Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
        "GitPython>=3.1.30",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "duppr=duppr.main:main",
        ],
    },
)
