import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="typescript_to_code",
    version="1.0.0",
    description="Translate TypeScript code samples, standalone or in Markdown documents, to Python",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Topic :: Documentation",
        "Topic :: Text Processing",
        "Intended Audience :: Developers",
    ],
    keywords="typescript python translation transpiler markdown documentation code samples",
    url="https://github.com/madlag/typescript_to_code",
    author="François Lagunas",
    author_email="francois.lagunas@gmail.com",
    license="MIT",
    packages=find_packages(exclude=["*.tests", "*.tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.2.0",
        "jinja2>=3.0.0",
        "tree-sitter>=0.23.0",
        "tree-sitter-typescript>=0.23.0",
        "markdown-it-py>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "typescript_to_code=typescript_to_code.typescript_to_code:typescript_to_code",
        ],
    },
    include_package_data=True,
    package_data={
        "typescript_to_code": ["templates/*.jinja2"],
    },
    zip_safe=False,
)
