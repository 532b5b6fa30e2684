from setuptools import setup

setup(
    name="argon_md",
    version="0.1",
    packages=["argon"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "matplotlib",
        "plotly",
        "streamlit",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
