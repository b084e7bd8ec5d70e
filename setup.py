from setuptools import setup, find_packages

with open("README.rst", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="cobweb-plot",
    version="0.1.0",

    description="Interactive cobweb plots of one-dimensional maps and their k-th iterates",

    long_description=long_description,
    long_description_content_type="text/x-rst",

    license="MIT",

    classifiers=[
        "Development Status :: 3 - Alpha",

        "Intended Audience :: Education",
        "Intended Audience :: Science/Research",

        "License :: OSI Approved :: MIT License",

        "Programming Language :: Python :: 3",

        "Topic :: Education",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],

    keywords="cobweb iteration nonlinear dynamical-systems education",

    packages=find_packages(exclude=["tests"]),

    install_requires=["numpy", "PyQt5", "sympy"],

    extras_require={
        "test": ["pytest"],
    },

    entry_points={
        "gui_scripts": [
            "cobweb-plot = cobweb.__main__:main",
        ]
    },

    python_requires=">=3.6",
)
