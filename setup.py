from setuptools import setup, find_packages

with open('README.md', 'r') as readme:
    long_description = readme.read()

setup(
    name='nurbskit', 
    version='1.0.0', 
    description='NURBS curves and tensor product surfaces: evaluation, knot insertion, knot removal and degree elevation.', 
    long_description=long_description, 
    long_description_content_type='text/markdown', 
    packages=find_packages(exclude=['tests', 'tests.*']), 
    install_requires=['numpy', 'numba', 'scipy'], 
    extras_require={'test': ['pytest']}, 
    python_requires='>=3.9', 
    classifiers=['Programming Language :: Python :: 3', 
                 'Operating System :: OS Independent'], 
    
)
