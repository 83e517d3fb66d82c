from setuptools import setup, find_packages

setup(
    name="rsatkit",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "mcp<2",
        "anyio",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "rsatkit=rsatkit.cli:main",
            "rsatkit-mcp=rsatkit.server:mcp.run",
        ]
    },
    description="rsatkit - list and install Windows RSAT capabilities",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    license="MIT"
)
