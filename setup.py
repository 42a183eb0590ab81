from setuptools import setup, find_packages

setup(
    name="repo-manager",
    version="1.0.0",
    description="Batch label, milestone and issue-assignment operations across GitHub repositories",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "aiohttp>=3.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "repo-manager=repo_manager.cli:main",
        ],
    },
)
