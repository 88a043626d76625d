# 文件: crushmpm/utils/__init__.py
"""
工具模块

- param_reader: 材料参数文本流的读写
"""

from .param_reader import TokenReader, format_parameters

__all__ = ['TokenReader', 'format_parameters']
