"""
Setup script for collect-images.
"""

from setuptools import setup
import os

# Read the contents of README.md
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Read version from collect_images.py
with open(os.path.join(this_directory, 'collect_images.py'), encoding='utf-8') as f:
    for line in f:
        if line.startswith('__version__'):
            version = line.split('=')[1].strip().strip('"\'')
            break

setup(
    name="collect-images",
    version=version,
    description="Co-locates images referenced by blog posts in an images/ folder beside each post",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="",
    author_email="",
    url="",
    # Flat layout: top-level modules only
    py_modules=["collect_images", "cli_parser", "errors", "http_client", "image_reference",
                "logger_setup", "post_processor", "relocation", "utils"],
    entry_points={
        "console_scripts": [
            "collect-images=collect_images:main",
        ],
    },
    install_requires=[
        "requests>=2.25.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Text Processing :: Markup :: Markdown",
        "Topic :: Utilities",
    ],
    python_requires=">=3.8",
)
