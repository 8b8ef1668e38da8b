"""
Modules package initialization.
This package contains all the functional modules of the blog.
"""

from noitro.modules import identity
from noitro.modules import posts
from noitro.modules import search
from noitro.modules import stats
from noitro.modules import media
