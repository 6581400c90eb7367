from setuptools import find_packages, setup

setup(
    name="optbind",
    version="0.1.0",
    description="Declarative command-line option binding with routing and option groups.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Roland Thomas Jr",
    author_email="roland@rtj.dev",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "rich>=13",
        "pydantic>=2",
        "pyyaml>=6",
        "toml>=0.10",
        "python-dateutil>=2.8",
        "python-json-logger>=3.1",
    ],
    extras_require={"test": ["pytest>=8"]},
    entry_points={"console_scripts": ["optbind=optbind.__main__:main"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Development Status :: 3 - Alpha",
    ],
)
