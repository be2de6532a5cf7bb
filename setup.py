"""
Setup file.
"""

import os

from setuptools import setup

URL = "https://github.com/ts-annotate/ts-annotate"
KEYWORDS = "timestamp log relative time filter"
HERE = os.path.dirname(os.path.abspath(__file__))



if __name__ == "__main__":
    setup(
        keywords=KEYWORDS,
        url=URL,
        include_package_data=True)
