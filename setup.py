from setuptools import setup, find_packages

setup(
    name="ship-assets",
    version="0.1.0",
    description="Render deployment assets and EKS terraform into an install directory.",
    packages=find_packages(include=["ship_assets", "ship_assets.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2",
        "PyYAML",
        "requests",
        "rich",
        "typer",
        "cli-core-yo>=1,<2",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "ship-assets=ship_assets.cli:main",
        ],
    },
)
