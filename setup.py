from setuptools import setup, find_packages

setup(
    name="rolling-ball",
    version="0.1.0",
    description="Rolling ball simulation on triangulated surfaces with topological point location",
    author="",
    packages=find_packages(exclude=["tests"]),
    py_modules=["rolling_ball"],
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "trimesh",
        "matplotlib",
        "tqdm",
        "networkx",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
