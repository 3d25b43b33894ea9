"""
Setup script for Foreclosure Case Manager
"""
from setuptools import setup, find_packages

setup(
    name="foreclosure-case-manager",
    version="1.0.0",
    description="Foreclosure case management with templated document generation",
    author="Your Firm",
    python_requires=">=3.10",
    py_modules=[
        "config",
        "models",
        "formatters",
        "variables",
        "substitution",
        "html_flatten",
        "pdf_renderer",
        "docx_export",
        "templates",
        "documents",
        "reports",
        "agent",
    ],
    packages=find_packages(include=["db", "dashboard", "dashboard.*", "commands"]),
    package_data={
        "dashboard": ["templates/*.html", "static/*"],
    },
    install_requires=[
        "python-dateutil>=2.8.2",
        "jinja2>=3.1.2",
        "click>=8.1.0",
        "rich>=13.0.0",
        "python-dotenv>=1.0.0",
        "psycopg2-binary>=2.9.9",
        "fastapi>=0.110.0",
        "itsdangerous>=2.1.0",
        "python-multipart>=0.0.9",
        "uvicorn>=0.27.0",
        "werkzeug>=3.0.0",
        "reportlab>=4.0.0",
        "python-docx>=1.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "case-manager=agent:main",
        ],
    },
)
