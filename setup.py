import setuptools

with open('./README.md', mode='r') as f:
    long_description = f.read()


setuptools.setup(
    name="motree-py",
    version="0.1",
    author="motree authors",
    # author_email="",
    description="motree, in-memory search trees. binary search tree, AVL tree, btree and N-ary tree, no third party dependency.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    # install_requires=[''],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.6",
)
