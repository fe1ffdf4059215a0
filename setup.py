from pathlib import Path
from setuptools import setup, find_packages

ROOT = Path(__file__).parent
README = (ROOT / "README.md").read_text(encoding="utf-8")

setup(
    name="threads_app",
    version="0.1.0",
    description="Threads social backend: posts, replies, communities and activity feeds on Firestore",
    long_description=README,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "tests.*", "examples")),
    include_package_data=True,
    package_data={"threads_app": ["py.typed"]},
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0,<3.0.0",
        "pydantic-settings>=2.0",
        "google-cloud-firestore>=2.11.0",  # FieldFilter / aggregation queries
    ],
    extras_require={
        "test": ["pytest", "pytest-asyncio", "httpx"],
        "dev": ["black", "ruff", "pytest", "pytest-asyncio", "httpx"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Framework :: AsyncIO",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: Message Boards",
        "Typing :: Typed",
    ],
    keywords=[
        "threads",
        "social",
        "firestore",
        "pydantic",
        "asyncio",
    ],
)
