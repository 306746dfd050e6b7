"""
Setup file.
"""

import os

from setuptools import setup

KEYWORDS = "compile_commands vcxproj msbuild static-analysis preprocessor platform abi"
HERE = os.path.dirname(os.path.abspath(__file__))



if __name__ == "__main__":
    setup(
        keywords=KEYWORDS,
        include_package_data=True)
