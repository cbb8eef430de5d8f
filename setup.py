from setuptools import setup, find_packages

setup(
    name="ecovive",
    version="0.1.0",
    packages=find_packages(include=["ecovive", "ecovive.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "psycopg2-binary",
        "passlib[bcrypt]",
        # passlib 1.7 self-test breaks on bcrypt >= 4.1
        "bcrypt>=4.0,<4.1",
        "python-multipart",
        "pydantic[email]>=2",
        "pydantic-settings",
        "python-dotenv",
        "alembic"
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
