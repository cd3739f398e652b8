from setuptools import setup, find_packages

setup(
    name="integratepy",
    version="0.1.0",
    description="Adaptive numerical integration with typed errors (QUADPACK for Python)",
    author="adamfilli",
    packages=find_packages(include=["integratepy", "integratepy.*"]),
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
