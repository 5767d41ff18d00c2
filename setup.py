from setuptools import setup, find_packages
import os

install_requires = ["pydantic>=2.5"]

# Define optional dependencies for development
extras_require = {"dev": ["pytest"]}

setup(
    name="nova-interpreter",
    version="0.2.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*", "*.tests", "*.tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.9",
    include_package_data=True,
    package_data={},
    description="Lexer, parser and tree-walking evaluator for the Nova language.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
