"""
Site Builder 核心后端
"""

__version__ = "0.1.0"
