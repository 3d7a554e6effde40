# setup.py
from setuptools import setup, find_packages

setup(
    name="expense-tracker",
    version="0.1.0",
    description="A personal income and expense tracker with a REST API and Excel reports",
    author="Your Name",
    author_email="you@example.com",
    url="https://github.com/yourusername/expense-tracker",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "python-dotenv>=0.19",
        "pandas>=1.1",
        "xlsxwriter>=3.0",
        "fastapi>=0.100",
        "pydantic>=2.0",
        "uvicorn>=0.20",
        "python-multipart>=0.0.6",
        "bcrypt>=4.0",
        "PyJWT>=2.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "openpyxl>=3.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "expense-tracker=expense_tracker.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
