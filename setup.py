# setup.py
from setuptools import setup, find_packages

setup(
    name="finance-tracker",
    version="0.1.0",
    description="Personal finance tracking: transactions, categories, savings goals and monthly reports",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "pandas>=1.1",
        "xlsxwriter>=3.0",
        "python-dotenv>=0.19",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "openpyxl>=3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "finance-tracker=finance_tracker.cli:main",
            "finance-tracker-web=finance_tracker.web:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
