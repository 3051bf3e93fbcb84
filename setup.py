"""
Setup script для модуля nlp_annotator
"""

from setuptools import setup, find_packages
from pathlib import Path

# Читаем README для описания
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="nlp_annotator",
    version="0.1.0",
    author="Sergey",
    description="Многоязычная аннотация текста: токены, язык, части речи, леммы, именованные сущности",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Text Processing :: Linguistic",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pandas>=1.5.0",
        "numpy>=1.21.0",
        "openpyxl>=3.0.0",
        "python-dotenv>=0.19.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "black>=22.0",
            "flake8>=4.0",
        ],
    },
    # Модели языков поставляются вместе с пакетом
    package_data={"nlp_annotator": ["data/models/*/*.yaml"]},
    include_package_data=True,
    zip_safe=False,
)
