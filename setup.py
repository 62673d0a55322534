import re
import setuptools

# Read without importing evolvefn, whose dependencies may not be installed yet
with open("evolvefn/__init__.py", "r") as fh:
    __version__ = re.search(r'__version__ = "(.+)"', fh.read()).group(1)

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="evolvefn",
    version=__version__,
    description="Evolve a function of one variable to fit sample data "
                "using Genetic Programming",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=["evolvefn"],
    scripts=["evolve-fn.py"],
    install_requires=[
        'numpy',
        'pandas',
        'scikit-learn',
        'sympy',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Education",
    ],
    python_requires='>=3.8',
)
